"""Analytics Domain Models"""

from datetime import datetime

from pydantic import BaseModel, Field


class ActivityEntry(BaseModel):
    """活动日志条目"""

    task_id: str
    task_title: str
    action: str = Field(description="可读动作文本，如 created / subtask added")
    timestamp: datetime
    user_id: str


class TaskMetrics(BaseModel):
    """单个时间桶的计数

    period 为桶标识：日 YYYY-MM-DD、ISO 周 YYYY-Www、月 YYYY-MM。
    """

    period: str = Field(description="桶标识")
    tasks_created: int = 0
    tasks_completed: int = 0
    tasks_deleted: int = 0
