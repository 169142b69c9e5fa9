"""AuthService -- 内存用户注册与登录

只维护“当前用户或无”这一状态，供外部守卫判断访问权限；
核心服务只消费 user_id。令牌存储不在此实现。
"""

import hashlib
import hmac
import secrets

import structlog
from ulid import ULID

from ..clock import Clock, utc_now
from ..exceptions import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    RegistrationError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from ..models.user import RegistrationRequest, User

log = structlog.get_logger()

_PBKDF2_ITERATIONS = 100_000


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)


class AuthService:
    """认证服务"""

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._users: dict[str, User] = {}
        # user_id -> (salt, digest)
        self._credentials: dict[str, tuple[bytes, bytes]] = {}
        self._current_user_id: str | None = None

    @property
    def current_user(self) -> User | None:
        """当前登录用户，未登录为 None"""
        if self._current_user_id is None:
            return None
        return self._users[self._current_user_id].model_copy()

    def register(self, request: RegistrationRequest) -> User:
        """注册新用户（不自动登录）

        Raises:
            RegistrationError: 邮箱或密码为空
            UserAlreadyExistsError: 邮箱已注册
        """
        email = request.email.strip().lower()
        if not email or not request.password:
            raise RegistrationError("Email and password are required")
        if self._find_by_email(email) is not None:
            raise UserAlreadyExistsError(email)

        user = User(
            user_id=str(ULID()),
            email=email,
            display_name=request.display_name or email.split("@")[0],
            created_at=self._clock(),
        )
        salt = secrets.token_bytes(16)
        self._users[user.user_id] = user
        self._credentials[user.user_id] = (salt, _hash_password(request.password, salt))

        log.info("user_registered", user_id=user.user_id)
        return user.model_copy()

    def login(self, email: str, password: str) -> User:
        """登录并设置当前用户

        Raises:
            UserNotFoundError: 邮箱未注册
            InvalidCredentialsError: 密码错误
        """
        user = self._find_by_email(email.strip().lower())
        if user is None:
            raise UserNotFoundError(email)

        salt, digest = self._credentials[user.user_id]
        if not hmac.compare_digest(digest, _hash_password(password, salt)):
            log.warning("login_failed", user_id=user.user_id)
            raise InvalidCredentialsError()

        user.last_login = self._clock()
        self._current_user_id = user.user_id
        log.info("user_logged_in", user_id=user.user_id)
        return user.model_copy()

    def logout(self) -> None:
        if self._current_user_id is not None:
            log.info("user_logged_out", user_id=self._current_user_id)
        self._current_user_id = None

    def _find_by_email(self, email: str) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user
        return None


def require_user(auth: AuthService) -> User:
    """访问守卫：返回当前用户，未登录时抛出 NotAuthenticatedError"""
    user = auth.current_user
    if user is None:
        raise NotAuthenticatedError()
    return user
