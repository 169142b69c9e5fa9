"""tasktrack Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .analytics import ActivityEntry, TaskMetrics
from .enums import (
    PRIORITY_ORDER,
    ChangeKind,
    MetricsPeriod,
    NotificationKind,
    Priority,
    SortDirection,
    SortField,
    StatusFilter,
)
from .event import TaskChangeEvent
from .gamification import Achievement, LevelProgress, UserProgress, default_achievements
from .notification import Notification
from .project import Project, ProjectDraft, ProjectPatch
from .query import TaskPage, TaskQuery
from .task import Comment, Subtask, SubtaskPatch, Task, TaskDraft, TaskPatch
from .user import RegistrationRequest, User

__all__ = [
    # 枚举
    "Priority",
    "PRIORITY_ORDER",
    "ChangeKind",
    "NotificationKind",
    "SortField",
    "SortDirection",
    "StatusFilter",
    "MetricsPeriod",
    # Task
    "Task",
    "TaskDraft",
    "TaskPatch",
    "Subtask",
    "SubtaskPatch",
    "Comment",
    # Event
    "TaskChangeEvent",
    # Project
    "Project",
    "ProjectDraft",
    "ProjectPatch",
    # Query
    "TaskQuery",
    "TaskPage",
    # 派生状态
    "Notification",
    "Achievement",
    "UserProgress",
    "LevelProgress",
    "default_achievements",
    "ActivityEntry",
    "TaskMetrics",
    # User
    "User",
    "RegistrationRequest",
]
