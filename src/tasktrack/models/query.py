"""任务列表查询模型 -- 筛选 + 排序 + 分页"""

from pydantic import BaseModel, Field

from .enums import Priority, SortDirection, SortField, StatusFilter
from .task import Task


class TaskQuery(BaseModel):
    """任务列表查询条件

    priority / project_id 为 None 表示不过滤；search 对标题和描述做大小写无关匹配。
    """

    status: StatusFilter = Field(default=StatusFilter.ALL)
    priority: Priority | None = Field(default=None)
    project_id: str | None = Field(default=None)
    search: str = Field(default="")
    sort_field: SortField = Field(default=SortField.DUE_DATE)
    sort_direction: SortDirection = Field(default=SortDirection.ASC)
    page: int = Field(default=1, ge=1, description="页码，从 1 开始")
    page_size: int = Field(default=10, ge=1, description="每页条数")


class TaskPage(BaseModel):
    """分页结果"""

    items: list[Task] = Field(default_factory=list)
    total: int = Field(default=0, description="筛选后的总条数")
    page: int = Field(default=1)
    total_pages: int = Field(default=0)
