"""AuthService 单元测试"""

import pytest
from helpers import BASE_TIME
from tasktrack.exceptions import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    RegistrationError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from tasktrack.models import RegistrationRequest
from tasktrack.services.auth import AuthService, require_user


@pytest.fixture
def auth(clock) -> AuthService:
    return AuthService(clock=clock)


def _request(email: str = "ada@example.com", password: str = "s3cret") -> RegistrationRequest:
    return RegistrationRequest(email=email, password=password, display_name="Ada")


class TestRegister:
    """注册测试"""

    def test_register(self, auth):
        user = auth.register(_request())
        assert user.email == "ada@example.com"
        assert user.display_name == "Ada"
        assert user.created_at == BASE_TIME
        assert auth.current_user is None

    def test_email_normalized(self, auth):
        user = auth.register(_request(email="  Ada@Example.COM "))
        assert user.email == "ada@example.com"

    def test_display_name_defaults_to_local_part(self, auth):
        user = auth.register(RegistrationRequest(email="bob@example.com", password="pw"))
        assert user.display_name == "bob"

    def test_duplicate_email_rejected(self, auth):
        auth.register(_request())
        with pytest.raises(UserAlreadyExistsError) as exc_info:
            auth.register(_request(email="ADA@example.com"))
        assert isinstance(exc_info.value, ValidationError)

    @pytest.mark.parametrize(("email", "password"), [("", "pw"), ("a@b.c", ""), ("   ", "pw")])
    def test_blank_fields_rejected(self, auth, email, password):
        with pytest.raises(RegistrationError):
            auth.register(_request(email=email, password=password))


class TestLogin:
    """登录 / 登出测试"""

    def test_login_sets_current_user(self, auth, clock):
        registered = auth.register(_request())
        clock.advance(hours=1)

        user = auth.login("ada@example.com", "s3cret")
        assert user.user_id == registered.user_id
        assert auth.current_user.user_id == registered.user_id
        assert auth.current_user.last_login == clock()

    def test_wrong_password(self, auth):
        auth.register(_request())
        with pytest.raises(InvalidCredentialsError):
            auth.login("ada@example.com", "wrong")
        assert auth.current_user is None

    def test_unknown_email(self, auth):
        with pytest.raises(UserNotFoundError):
            auth.login("nobody@example.com", "pw")

    def test_logout(self, auth):
        auth.register(_request())
        auth.login("ada@example.com", "s3cret")
        auth.logout()
        assert auth.current_user is None


class TestRequireUser:
    """访问守卫测试"""

    def test_requires_login(self, auth):
        with pytest.raises(NotAuthenticatedError):
            require_user(auth)

    def test_returns_current_user(self, auth):
        auth.register(_request())
        auth.login("ada@example.com", "s3cret")
        assert require_user(auth).email == "ada@example.com"
