"""Task Domain Model

Task 由 TaskStore 独占所有权；Subtask 与 Comment 没有独立生命周期，
只能通过所属 Task 修改。
时间字段统一为带时区的 UTC datetime（naive 值按 UTC 解释）。
"""

from datetime import UTC, datetime
from typing import Annotated, Self

from pydantic import AfterValidator, BaseModel, Field, model_validator

from .enums import Priority


def _as_utc(value: datetime) -> datetime:
    """naive datetime 视为 UTC，aware datetime 转换到 UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Subtask(BaseModel):
    """子任务"""

    subtask_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="子任务标题")
    completed: bool = Field(default=False, description="是否完成")


class Comment(BaseModel):
    """任务评论"""

    comment_id: str = Field(description="唯一标识，ULID 格式")
    author_id: str = Field(description="评论者 ID")
    text: str = Field(description="评论内容")
    created_at: UtcDatetime = Field(description="评论时间")


class Task(BaseModel):
    """Task 数据模型

    不变量：
    - task_id 创建后不可变
    - updated_at >= created_at，且单调不减
    """

    task_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    completed: bool = Field(default=False, description="是否完成")
    created_at: UtcDatetime = Field(description="创建时间")
    updated_at: UtcDatetime = Field(description="更新时间")
    due_date: UtcDatetime | None = Field(default=None, description="截止时间")
    priority: Priority = Field(default=Priority.MEDIUM, description="优先级")
    project_id: str | None = Field(default=None, description="所属项目 ID")
    tags: list[str] = Field(default_factory=list, description="标签")
    subtasks: list[Subtask] = Field(default_factory=list, description="有序子任务列表")
    created_by: str = Field(description="任务所有者 ID")
    assignee: str | None = Field(default=None, description="被指派人 ID")
    comments: list[Comment] = Field(default_factory=list, description="评论列表")

    @model_validator(mode="after")
    def check_timestamps(self) -> Self:
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self


class TaskDraft(BaseModel):
    """创建任务的输入（不含 ID 与时间戳，由 TaskStore 生成）"""

    title: str
    description: str | None = None
    completed: bool = False
    due_date: UtcDatetime | None = None
    priority: Priority = Priority.MEDIUM
    project_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    created_by: str
    assignee: str | None = None


class TaskPatch(BaseModel):
    """任务部分更新

    只合并显式设置过的字段（model_fields_set），
    task_id、时间戳、子任务和评论不能通过 patch 修改。
    """

    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    due_date: UtcDatetime | None = None
    priority: Priority | None = None
    project_id: str | None = None
    tags: list[str] | None = None
    assignee: str | None = None


class SubtaskPatch(BaseModel):
    """子任务部分更新"""

    title: str | None = None
    completed: bool | None = None
