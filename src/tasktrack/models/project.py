"""Project Domain Model"""

from pydantic import BaseModel, Field

from .task import UtcDatetime


class Project(BaseModel):
    """Project 数据模型"""

    project_id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="项目名称")
    description: str | None = Field(default=None, description="项目描述")
    color: str = Field(default="#4285F4", description="展示颜色")
    created_at: UtcDatetime = Field(description="创建时间")
    updated_at: UtcDatetime = Field(description="更新时间")
    is_active: bool = Field(default=True, description="是否活跃（归档后为 False）")
    created_by: str = Field(description="项目所有者 ID")


class ProjectDraft(BaseModel):
    """创建项目的输入"""

    name: str
    description: str | None = None
    color: str = "#4285F4"
    is_active: bool = True
    created_by: str


class ProjectPatch(BaseModel):
    """项目部分更新"""

    name: str | None = None
    description: str | None = None
    color: str | None = None
    is_active: bool | None = None
