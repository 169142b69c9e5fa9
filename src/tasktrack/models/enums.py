"""枚举定义

包含任务优先级、变更类型 ChangeKind、通知类型、排序字段等枚举，
以及优先级排序权重 PRIORITY_ORDER。
"""

from enum import StrEnum


class Priority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# 优先级排序权重（low < medium < high < urgent）
PRIORITY_ORDER: dict[Priority, int] = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.URGENT: 3,
}


class ChangeKind(StrEnum):
    """任务变更类型 -- 封闭集合，事件总线只接受这些类型"""

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    COMPLETED = "COMPLETED"
    DELETED = "DELETED"
    DEADLINE_APPROACHING = "DEADLINE_APPROACHING"
    ASSIGNED = "ASSIGNED"
    COMMENT_ADDED = "COMMENT_ADDED"
    SUBTASK_ADDED = "SUBTASK_ADDED"
    SUBTASK_COMPLETED = "SUBTASK_COMPLETED"
    SUBTASK_DELETED = "SUBTASK_DELETED"


class NotificationKind(StrEnum):
    """通知严重程度"""

    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class SortField(StrEnum):
    """任务列表可排序字段"""

    DUE_DATE = "due_date"
    PRIORITY = "priority"
    TITLE = "title"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortDirection(StrEnum):
    """排序方向"""

    ASC = "asc"
    DESC = "desc"


class StatusFilter(StrEnum):
    """完成状态筛选"""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class MetricsPeriod(StrEnum):
    """统计分桶粒度"""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
