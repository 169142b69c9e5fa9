"""ProjectStore -- 内存项目存储

项目变更不产生事件；读写返回值均为独立副本。
"""

from collections.abc import Iterable

import structlog
from ulid import ULID

from ..clock import Clock, utc_now
from ..exceptions import ProjectNotFoundError
from ..models.project import Project, ProjectDraft, ProjectPatch

log = structlog.get_logger()


class ProjectStore:
    """内存项目存储"""

    def __init__(self, clock: Clock = utc_now, initial_projects: Iterable[Project] = ()) -> None:
        self._clock = clock
        self._projects: dict[str, Project] = {
            project.project_id: project.model_copy(deep=True) for project in initial_projects
        }

    def list_projects(self) -> list[Project]:
        return [p.model_copy(deep=True) for p in self._projects.values()]

    def list_active_projects(self) -> list[Project]:
        return [p.model_copy(deep=True) for p in self._projects.values() if p.is_active]

    def get_project(self, project_id: str) -> Project:
        """根据 project_id 查询项目

        Raises:
            ProjectNotFoundError: 项目不存在
        """
        return self._require(project_id).model_copy(deep=True)

    def create_project(self, draft: ProjectDraft) -> Project:
        now = self._clock()
        project = Project(
            project_id=str(ULID()),
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )
        self._projects[project.project_id] = project
        log.info("project_created", project_id=project.project_id, name=project.name)
        return project.model_copy(deep=True)

    def update_project(self, project_id: str, patch: ProjectPatch) -> Project:
        """部分更新项目，description 可显式置空"""
        current = self._require(project_id)
        updates = {
            name: value
            for name in patch.model_fields_set
            if (value := getattr(patch, name)) is not None or name == "description"
        }
        updated = current.model_copy(
            update={**updates, "updated_at": max(self._clock(), current.updated_at)}
        )
        self._projects[project_id] = updated
        return updated.model_copy(deep=True)

    def delete_project(self, project_id: str) -> None:
        """删除项目（不级联删除任务）"""
        self._require(project_id)
        del self._projects[project_id]
        log.info("project_deleted", project_id=project_id)

    def archive_project(self, project_id: str) -> Project:
        return self.update_project(project_id, ProjectPatch(is_active=False))

    def restore_project(self, project_id: str) -> Project:
        return self.update_project(project_id, ProjectPatch(is_active=True))

    def _require(self, project_id: str) -> Project:
        project = self._projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project
