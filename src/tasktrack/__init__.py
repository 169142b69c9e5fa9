"""tasktrack -- 任务管理核心

TaskStore 持有任务并在每次变更后同步发布事件，
Analytics / Notification / Gamification 服务订阅事件并维护各自的派生状态。
"""

# 组合根
from .app import TaskTrackApp, UserSummary, create_app

# 配置
from .config import TaskTrackConfig, load_config

# 异常
from .exceptions import (
    NotFoundError,
    SubtaskNotFoundError,
    TaskNotFoundError,
    TaskTrackError,
    ValidationError,
)
from .services import AnalyticsService, AuthService, GamificationService, NotificationService
from .store import EventBus, ProjectStore, TaskStore

__all__ = [
    "TaskTrackApp",
    "UserSummary",
    "create_app",
    "TaskTrackConfig",
    "load_config",
    "EventBus",
    "TaskStore",
    "ProjectStore",
    "AnalyticsService",
    "NotificationService",
    "GamificationService",
    "AuthService",
    "TaskTrackError",
    "NotFoundError",
    "TaskNotFoundError",
    "SubtaskNotFoundError",
    "ValidationError",
]
