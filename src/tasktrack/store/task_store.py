"""TaskStore -- 任务的唯一所有者与唯一事件源

每次成功的变更都会同步发布一个主事件 UPDATED（创建为 CREATED，删除为 DELETED）；
完成、子任务增/完成/删、指派、评论会在 UPDATED 之后再发布一个语义更具体的事件。
读操作与写操作的返回值都是独立副本，修改它们不会影响 TaskStore 内部状态。
"""

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any

import structlog
from ulid import ULID

from ..clock import Clock, utc_now
from ..exceptions import SubtaskNotFoundError, TaskNotFoundError
from ..models.enums import ChangeKind, Priority
from ..models.event import TaskChangeEvent
from ..models.query import TaskPage, TaskQuery
from ..models.task import Comment, Subtask, SubtaskPatch, Task, TaskDraft, TaskPatch
from .event_bus import EventBus
from .query import run_query

log = structlog.get_logger()

# patch 中允许显式置空的字段；其余字段传 None 表示不修改
_NULLABLE_FIELDS = {"description", "due_date", "project_id", "assignee"}


class TaskStore:
    """内存任务存储（Subject）"""

    def __init__(
        self,
        bus: EventBus,
        clock: Clock = utc_now,
        initial_tasks: Iterable[Task] = (),
        page_size: int = 10,
    ) -> None:
        """
        Args:
            bus: 事件总线，所有变更事件经由它发布
            clock: 时钟
            initial_tasks: 初始任务（复制后保存，不触发事件）
            page_size: 查询未指定 page_size 时使用的分页大小
        """
        self._bus = bus
        self._clock = clock
        self._page_size = page_size
        self._tasks: dict[str, Task] = {
            task.task_id: task.model_copy(deep=True) for task in initial_tasks
        }

    @property
    def bus(self) -> EventBus:
        return self._bus

    # ---- 读操作 ----

    def get_task(self, task_id: str) -> Task:
        """根据 task_id 查询任务

        Raises:
            TaskNotFoundError: 任务不存在
        """
        return self._require(task_id).model_copy(deep=True)

    def list_tasks(self) -> list[Task]:
        """查询全部任务（按创建顺序）"""
        return self._select(lambda task: True)

    def list_by_project(self, project_id: str) -> list[Task]:
        return self._select(lambda task: task.project_id == project_id)

    def list_by_tag(self, tag: str) -> list[Task]:
        return self._select(lambda task: tag in task.tags)

    def list_by_priority(self, priority: Priority) -> list[Task]:
        return self._select(lambda task: task.priority == priority)

    def list_by_completion(self, completed: bool) -> list[Task]:
        return self._select(lambda task: task.completed == completed)

    def list_due_between(self, start: datetime, end: datetime) -> list[Task]:
        """查询截止时间落在 [start, end) 内的未完成任务"""
        return self._select(
            lambda task: not task.completed
            and task.due_date is not None
            and start <= task.due_date < end
        )

    def list_overdue(self) -> list[Task]:
        """查询已过截止时间的未完成任务"""
        now = self._clock()
        return self._select(
            lambda task: not task.completed
            and task.due_date is not None
            and task.due_date < now
        )

    def list_due_today(self) -> list[Task]:
        """查询今天（UTC）到期的未完成任务"""
        start = self._clock().replace(hour=0, minute=0, second=0, microsecond=0)
        return self.list_due_between(start, start + timedelta(days=1))

    def list_due_this_week(self) -> list[Task]:
        """查询本周（周一开始）到期的未完成任务"""
        today = self._clock().replace(hour=0, minute=0, second=0, microsecond=0)
        week_start = today - timedelta(days=today.weekday())
        return self.list_due_between(week_start, week_start + timedelta(days=7))

    def query_tasks(self, query: TaskQuery | None = None) -> TaskPage:
        """筛选 + 排序 + 分页"""
        query = query or TaskQuery()
        if "page_size" not in query.model_fields_set:
            query = query.model_copy(update={"page_size": self._page_size})
        return run_query(self._select(lambda task: True), query)

    # ---- 写操作 ----

    def create_task(self, draft: TaskDraft) -> Task:
        """创建任务，发布 CREATED"""
        now = self._clock()
        task = Task(
            task_id=str(ULID()),
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )
        self._tasks[task.task_id] = task

        log.info("task_created", task_id=task.task_id, created_by=task.created_by)
        self._publish(task, ChangeKind.CREATED)
        return task.model_copy(deep=True)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        """部分更新任务

        发布 UPDATED；若 completed 由 False 变为 True，随后再发布 COMPLETED。

        Raises:
            TaskNotFoundError: 任务不存在
        """
        current = self._require(task_id)
        updates = {
            name: value
            for name in patch.model_fields_set
            if (value := getattr(patch, name)) is not None or name in _NULLABLE_FIELDS
        }

        follow_up = None
        if not current.completed and updates.get("completed") is True:
            follow_up = ChangeKind.COMPLETED

        return self._commit(current, updates, follow_up)

    def toggle_completion(self, task_id: str) -> Task:
        """切换完成状态，只有未完成 -> 完成时发布 COMPLETED"""
        current = self._require(task_id)
        return self.update_task(task_id, TaskPatch(completed=not current.completed))

    def complete_task(self, task_id: str) -> Task:
        """标记完成；已完成的任务只发布 UPDATED"""
        return self.update_task(task_id, TaskPatch(completed=True))

    def delete_task(self, task_id: str) -> None:
        """删除任务，发布 DELETED（携带删除前的快照）

        Raises:
            TaskNotFoundError: 任务不存在，任务列表保持不变
        """
        task = self._require(task_id)
        del self._tasks[task_id]

        log.info("task_deleted", task_id=task_id, created_by=task.created_by)
        self._publish(task, ChangeKind.DELETED)

    def assign_task(self, task_id: str, assignee_id: str) -> Task:
        """指派任务，发布 UPDATED + ASSIGNED"""
        current = self._require(task_id)
        return self._commit(current, {"assignee": assignee_id}, ChangeKind.ASSIGNED)

    def add_comment(self, task_id: str, author_id: str, text: str) -> Task:
        """添加评论，发布 UPDATED + COMMENT_ADDED"""
        current = self._require(task_id)
        comment = Comment(
            comment_id=str(ULID()),
            author_id=author_id,
            text=text,
            created_at=self._clock(),
        )
        return self._commit(
            current,
            {"comments": [*current.comments, comment]},
            ChangeKind.COMMENT_ADDED,
        )

    # ---- 子任务 ----

    def add_subtask(self, task_id: str, title: str) -> Task:
        """追加子任务，发布 UPDATED + SUBTASK_ADDED"""
        current = self._require(task_id)
        subtask = Subtask(subtask_id=str(ULID()), title=title)
        return self._commit(
            current,
            {"subtasks": [*current.subtasks, subtask]},
            ChangeKind.SUBTASK_ADDED,
        )

    def update_subtask(self, task_id: str, subtask_id: str, patch: SubtaskPatch) -> Task:
        """部分更新子任务

        发布 UPDATED；子任务由未完成变为完成时再发布 SUBTASK_COMPLETED。

        Raises:
            TaskNotFoundError: 任务不存在
            SubtaskNotFoundError: 子任务不存在
        """
        current = self._require(task_id)
        index = self._subtask_index(current, subtask_id)
        subtask = current.subtasks[index]

        changes = {
            name: value
            for name in patch.model_fields_set
            if (value := getattr(patch, name)) is not None
        }
        updated_subtask = subtask.model_copy(update=changes)

        subtasks = list(current.subtasks)
        subtasks[index] = updated_subtask

        follow_up = None
        if not subtask.completed and updated_subtask.completed:
            follow_up = ChangeKind.SUBTASK_COMPLETED

        return self._commit(current, {"subtasks": subtasks}, follow_up)

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Task:
        """切换子任务完成状态"""
        current = self._require(task_id)
        subtask = current.subtasks[self._subtask_index(current, subtask_id)]
        return self.update_subtask(
            task_id, subtask_id, SubtaskPatch(completed=not subtask.completed)
        )

    def delete_subtask(self, task_id: str, subtask_id: str) -> Task:
        """删除子任务，发布 UPDATED + SUBTASK_DELETED"""
        current = self._require(task_id)
        self._subtask_index(current, subtask_id)
        subtasks = [s for s in current.subtasks if s.subtask_id != subtask_id]
        return self._commit(current, {"subtasks": subtasks}, ChangeKind.SUBTASK_DELETED)

    # ---- 截止提醒 ----

    def check_deadline_approaching(self, threshold_hours: int = 24) -> list[Task]:
        """扫描即将到期的未完成任务

        截止时间落在 [now, now + threshold_hours] 内的每个任务发布一次
        DEADLINE_APPROACHING。由外部调度器周期调用。

        Returns:
            命中的任务副本列表
        """
        now = self._clock()
        limit = now + timedelta(hours=threshold_hours)
        matched = [
            task
            for task in list(self._tasks.values())
            if not task.completed and task.due_date is not None and now <= task.due_date <= limit
        ]
        for task in matched:
            self._publish(task, ChangeKind.DEADLINE_APPROACHING)

        log.info(
            "deadline_scan_completed",
            threshold_hours=threshold_hours,
            matched=len(matched),
        )
        return [task.model_copy(deep=True) for task in matched]

    # ---- 内部 ----

    def _require(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    @staticmethod
    def _subtask_index(task: Task, subtask_id: str) -> int:
        for index, subtask in enumerate(task.subtasks):
            if subtask.subtask_id == subtask_id:
                return index
        raise SubtaskNotFoundError(task.task_id, subtask_id)

    def _select(self, predicate) -> list[Task]:
        return [task.model_copy(deep=True) for task in self._tasks.values() if predicate(task)]

    def _commit(
        self,
        current: Task,
        updates: dict[str, Any],
        follow_up: ChangeKind | None = None,
    ) -> Task:
        """合并更新、推进 updated_at、发布 UPDATED（及可选的后续事件）"""
        # updated_at 单调不减且不早于 created_at，即使时钟回拨
        updated_at = max(self._clock(), current.updated_at, current.created_at)
        updated = Task.model_validate(
            {**current.model_dump(), **updates, "updated_at": updated_at}
        )
        self._tasks[updated.task_id] = updated

        log.debug(
            "task_updated",
            task_id=updated.task_id,
            fields=sorted(updates),
            follow_up=follow_up.value if follow_up else None,
        )
        self._publish(updated, ChangeKind.UPDATED)
        if follow_up is not None:
            self._publish(updated, follow_up)
        return updated.model_copy(deep=True)

    def _publish(self, task: Task, kind: ChangeKind) -> None:
        event = TaskChangeEvent(
            event_id=str(ULID()),
            kind=kind,
            task=task.model_copy(deep=True),
            ts=self._clock(),
        )
        self._bus.publish(event)
