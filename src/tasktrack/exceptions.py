"""tasktrack 异常体系

所有失败都以同步异常的形式抛给调用方，不做重试，也不做部分失败处理。
- NotFoundError: 操作的实体不存在
- ValidationError: 输入不合法（注册/登录等）
"""


class TaskTrackError(Exception):
    """tasktrack 基础异常"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(TaskTrackError):
    """实体不存在"""

    entity = "Entity"

    def __init__(self, entity_id: str) -> None:
        """
        Args:
            entity_id: 查找失败的实体 ID
        """
        super().__init__(f"{self.entity} with ID {entity_id} not found")
        self.entity_id = entity_id


class TaskNotFoundError(NotFoundError):
    entity = "Task"


class ProjectNotFoundError(NotFoundError):
    entity = "Project"


class UserNotFoundError(NotFoundError):
    entity = "User"


class SubtaskNotFoundError(NotFoundError):
    """子任务不存在（所属任务存在）"""

    entity = "Subtask"

    def __init__(self, task_id: str, subtask_id: str) -> None:
        super().__init__(subtask_id)
        self.task_id = task_id


class ValidationError(TaskTrackError):
    """输入校验失败"""


class RegistrationError(ValidationError):
    """注册信息不合法"""


class UserAlreadyExistsError(RegistrationError):
    """邮箱已被注册"""

    def __init__(self, email: str) -> None:
        super().__init__(f"User already exists: {email}")
        self.email = email


class InvalidCredentialsError(ValidationError):
    """密码错误"""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class NotAuthenticatedError(ValidationError):
    """当前没有登录用户"""

    def __init__(self) -> None:
        super().__init__("Authentication required")
