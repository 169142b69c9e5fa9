"""任务列表查询 -- 筛选、排序、分页

排序字段来自封闭枚举 SortField，每个字段对应一个显式的 key 函数；
缺失值（如无截止时间）无论升序降序都排在末尾。
"""

import math
from collections.abc import Callable, Iterable
from typing import Any

from ..models.enums import PRIORITY_ORDER, SortDirection, SortField, StatusFilter
from ..models.query import TaskPage, TaskQuery
from ..models.task import Task

_SORT_KEYS: dict[SortField, Callable[[Task], Any]] = {
    SortField.DUE_DATE: lambda task: task.due_date,
    SortField.PRIORITY: lambda task: PRIORITY_ORDER[task.priority],
    SortField.TITLE: lambda task: task.title.casefold(),
    SortField.CREATED_AT: lambda task: task.created_at,
    SortField.UPDATED_AT: lambda task: task.updated_at,
}


def sort_tasks(
    tasks: Iterable[Task],
    field: SortField,
    direction: SortDirection = SortDirection.ASC,
) -> list[Task]:
    """按指定字段排序，缺失值排在末尾"""
    key = _SORT_KEYS[field]
    items = list(tasks)
    present = [t for t in items if key(t) is not None]
    missing = [t for t in items if key(t) is None]
    present.sort(key=key, reverse=direction == SortDirection.DESC)
    return present + missing


def filter_tasks(tasks: Iterable[Task], query: TaskQuery) -> list[Task]:
    """按完成状态、优先级、项目、关键词筛选"""
    result = list(tasks)

    if query.status == StatusFilter.COMPLETED:
        result = [t for t in result if t.completed]
    elif query.status == StatusFilter.ACTIVE:
        result = [t for t in result if not t.completed]

    if query.priority is not None:
        result = [t for t in result if t.priority == query.priority]

    if query.project_id is not None:
        result = [t for t in result if t.project_id == query.project_id]

    term = query.search.strip().lower()
    if term:
        result = [
            t
            for t in result
            if term in t.title.lower() or (t.description and term in t.description.lower())
        ]

    return result


def run_query(tasks: Iterable[Task], query: TaskQuery) -> TaskPage:
    """筛选 -> 排序 -> 分页"""
    filtered = filter_tasks(tasks, query)
    ordered = sort_tasks(filtered, query.sort_field, query.sort_direction)

    total = len(ordered)
    start = (query.page - 1) * query.page_size
    return TaskPage(
        items=ordered[start : start + query.page_size],
        total=total,
        page=query.page,
        total_pages=math.ceil(total / query.page_size),
    )
