"""User Domain Model -- 认证服务的最小用户表示

核心服务只消费 user_id，不依赖认证状态。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """已注册用户"""

    user_id: str = Field(description="唯一标识，ULID 格式")
    email: str = Field(description="登录邮箱")
    display_name: str = Field(default="", description="显示名称")
    created_at: datetime = Field(description="注册时间")
    last_login: datetime | None = Field(default=None, description="最近登录时间")


class RegistrationRequest(BaseModel):
    """注册请求"""

    email: str
    password: str
    display_name: str = ""
