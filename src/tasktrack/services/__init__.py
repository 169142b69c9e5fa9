"""tasktrack Services -- 订阅任务事件的派生状态服务 + 认证"""

from .analytics import AnalyticsService
from .auth import AuthService, require_user
from .gamification import GamificationService, calculate_level
from .notification import NotificationService

__all__ = [
    "AnalyticsService",
    "GamificationService",
    "NotificationService",
    "AuthService",
    "require_user",
    "calculate_level",
]
