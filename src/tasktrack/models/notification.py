"""Notification Domain Model"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import NotificationKind


class Notification(BaseModel):
    """通知 -- 只由派生状态服务创建"""

    notification_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="通知标题")
    message: str = Field(description="通知正文")
    task_id: str | None = Field(default=None, description="关联任务 ID")
    user_id: str = Field(description="接收者 ID")
    timestamp: datetime = Field(description="创建时间")
    is_read: bool = Field(default=False, description="是否已读")
    kind: NotificationKind = Field(default=NotificationKind.INFO, description="严重程度")
