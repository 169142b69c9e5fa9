"""tasktrack Store -- 内存存储与事件总线"""

from .event_bus import EventBus, TaskEventHandler
from .project_store import ProjectStore
from .query import filter_tasks, run_query, sort_tasks
from .task_store import TaskStore

__all__ = [
    "EventBus",
    "TaskEventHandler",
    "TaskStore",
    "ProjectStore",
    "filter_tasks",
    "sort_tasks",
    "run_query",
]
