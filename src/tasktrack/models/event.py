"""TaskChangeEvent Domain Model

变更事件是瞬时的：只在事件总线上分发，从不持久化。
task 字段是变更后的独立快照，订阅者修改它不会影响 TaskStore。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ChangeKind
from .task import Task


class TaskChangeEvent(BaseModel):
    """任务变更事件 -- (Task 快照, ChangeKind) 二元组"""

    event_id: str = Field(description="唯一标识，ULID 格式，时间有序")
    kind: ChangeKind = Field(description="变更类型")
    task: Task = Field(description="变更后的任务快照")
    ts: datetime = Field(description="事件时间戳")

    @property
    def user_id(self) -> str:
        """事件归属用户（任务所有者）"""
        return self.task.created_by
