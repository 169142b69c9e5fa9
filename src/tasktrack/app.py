"""组合根 -- 显式构造事件总线、存储与服务

不存在模块级单例：每个 TaskTrackApp 持有自己的一组实例，
服务在构造时向同一个 EventBus 注册，注册顺序即通知顺序：
Analytics -> Notification -> Gamification。
"""

import structlog
from pydantic import BaseModel

from .clock import Clock, utc_now
from .config import TaskTrackConfig, load_config
from .models.task import Task
from .models.user import RegistrationRequest, User
from .seed import sample_projects, sample_tasks
from .services.analytics import AnalyticsService
from .services.auth import AuthService
from .services.gamification import GamificationService
from .services.notification import NotificationService
from .store.event_bus import EventBus
from .store.project_store import ProjectStore
from .store.task_store import TaskStore

log = structlog.get_logger()

WELCOME_TITLE = "Welcome to Task Manager"
WELCOME_MESSAGE = "Create your first task to get started!"


class UserSummary(BaseModel):
    """单个用户的派生状态汇总"""

    user_id: str
    points: int
    level: int
    streak_days: int
    achievements: list[str]
    unread_notifications: int
    productivity_score: float


class TaskTrackApp:
    """tasktrack 实例组 -- 共享同一个事件总线"""

    def __init__(
        self,
        config: TaskTrackConfig,
        bus: EventBus,
        task_store: TaskStore,
        project_store: ProjectStore,
        analytics: AnalyticsService,
        notifications: NotificationService,
        gamification: GamificationService,
        auth: AuthService,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config
        self.clock = clock
        self.bus = bus
        self.task_store = task_store
        self.project_store = project_store
        self.analytics = analytics
        self.notifications = notifications
        self.gamification = gamification
        self.auth = auth

    def register_user(self, request: RegistrationRequest) -> User:
        """注册用户并发送新手引导通知"""
        user = self.auth.register(request)
        self.notifications.create_notification(user.user_id, WELCOME_TITLE, WELCOME_MESSAGE)
        return user

    def check_deadlines(self) -> list[Task]:
        """按配置的窗口扫描即将到期的任务"""
        return self.task_store.check_deadline_approaching(self.config.deadline_threshold_hours)

    def summarize_user(self, user_id: str) -> UserSummary:
        return UserSummary(
            user_id=user_id,
            points=self.gamification.get_user_points(user_id),
            level=self.gamification.get_user_level(user_id),
            streak_days=self.gamification.get_user_streak(user_id),
            achievements=[
                a.achievement_id for a in self.gamification.get_user_achievements(user_id)
            ],
            unread_notifications=self.notifications.get_unread_count(user_id),
            productivity_score=self.analytics.get_productivity_score(user_id),
        )


def create_app(
    config: TaskTrackConfig | None = None,
    clock: Clock = utc_now,
    seed_owner: str | None = None,
) -> TaskTrackApp:
    """创建 TaskTrackApp

    Args:
        config: 配置，为空时从环境变量加载
        clock: 时钟，所有组件共享
        seed_owner: 非空时预置示例项目与任务（归属该用户，不触发事件）

    Returns:
        TaskTrackApp 实例
    """
    config = config or load_config()
    bus = EventBus(isolate_errors=config.isolate_observer_errors)

    projects = []
    tasks = []
    if seed_owner is not None:
        now = clock()
        projects = sample_projects(seed_owner, now)
        tasks = sample_tasks(seed_owner, now, projects)

    app = TaskTrackApp(
        config=config,
        bus=bus,
        task_store=TaskStore(
            bus,
            clock=clock,
            initial_tasks=tasks,
            page_size=config.page_size,
        ),
        project_store=ProjectStore(clock=clock, initial_projects=projects),
        analytics=AnalyticsService(
            bus,
            clock=clock,
            recent_activity_limit=config.recent_activity_limit,
            productivity_days=config.productivity_days,
        ),
        notifications=NotificationService(bus, clock=clock, limit=config.notification_limit),
        gamification=GamificationService(bus, clock=clock),
        auth=AuthService(clock=clock),
        clock=clock,
    )

    log.info(
        "app_created",
        seeded=seed_owner is not None,
        task_count=len(tasks),
        subscriber_count=bus.subscriber_count,
    )
    return app
