"""NotificationService -- 用户通知

只响应 DEADLINE_APPROACHING / COMPLETED / ASSIGNED / COMMENT_ADDED 四类事件，
按模板生成通知；也支持直接创建临时通知（如新用户引导）。
每个用户的通知按时间倒序保存，超过上限时淘汰最旧的。
所有读写操作都按 user_id 隔离。
"""

import structlog
from ulid import ULID

from ..clock import Clock, utc_now
from ..models.enums import ChangeKind, NotificationKind
from ..models.event import TaskChangeEvent
from ..models.notification import Notification
from ..store.event_bus import EventBus

log = structlog.get_logger()

DEFAULT_NOTIFICATION_LIMIT = 100

# ChangeKind -> (标题, 正文模板, 严重程度)
_TEMPLATES: dict[ChangeKind, tuple[str, str, NotificationKind]] = {
    ChangeKind.DEADLINE_APPROACHING: (
        "Deadline Approaching",
        'Task "{title}" is due soon.',
        NotificationKind.WARNING,
    ),
    ChangeKind.COMPLETED: (
        "Task Completed",
        'Task "{title}" has been completed.',
        NotificationKind.SUCCESS,
    ),
    ChangeKind.ASSIGNED: (
        "New Task Assignment",
        'You have been assigned to task "{title}".',
        NotificationKind.INFO,
    ),
    ChangeKind.COMMENT_ADDED: (
        "New Comment",
        'New comment on task "{title}".',
        NotificationKind.INFO,
    ),
}


class NotificationService:
    """通知派生状态服务"""

    def __init__(
        self,
        bus: EventBus,
        clock: Clock = utc_now,
        limit: int = DEFAULT_NOTIFICATION_LIMIT,
    ) -> None:
        """
        Args:
            bus: 事件总线
            clock: 时钟
            limit: 每用户保留的通知条数
        """
        self._clock = clock
        self._limit = limit
        # user_id -> 通知列表（最新在前）
        self._notifications: dict[str, list[Notification]] = {}
        self._bus = bus
        bus.subscribe(self.handle_event)

    def detach(self) -> None:
        self._bus.unsubscribe(self.handle_event)

    def handle_event(self, event: TaskChangeEvent) -> None:
        """事件订阅入口，其余事件类型忽略"""
        template = _TEMPLATES.get(event.kind)
        if template is None:
            return

        title, message, kind = template
        task = event.task
        recipient = task.created_by
        if event.kind == ChangeKind.ASSIGNED and task.assignee:
            recipient = task.assignee

        self._add(
            Notification(
                notification_id=str(ULID()),
                title=title,
                message=message.format(title=task.title),
                task_id=task.task_id,
                user_id=recipient,
                timestamp=self._clock(),
                kind=kind,
            )
        )

    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        kind: NotificationKind = NotificationKind.INFO,
        task_id: str | None = None,
    ) -> Notification:
        """直接创建一条通知（不经由任务事件）"""
        notification = Notification(
            notification_id=str(ULID()),
            title=title,
            message=message,
            task_id=task_id,
            user_id=user_id,
            timestamp=self._clock(),
            kind=kind,
        )
        self._add(notification)
        return notification.model_copy()

    # ---- 读操作 ----

    def get_notifications(self, user_id: str) -> list[Notification]:
        """用户的全部通知，最新在前"""
        return [n.model_copy() for n in self._notifications.get(user_id, [])]

    def get_unread_count(self, user_id: str) -> int:
        return sum(1 for n in self._notifications.get(user_id, []) if not n.is_read)

    # ---- 写操作 ----

    def mark_as_read(self, user_id: str, notification_id: str) -> bool:
        """标记单条已读

        Returns:
            True 如果找到该用户的这条通知
        """
        for notification in self._notifications.get(user_id, []):
            if notification.notification_id == notification_id:
                notification.is_read = True
                return True
        return False

    def mark_all_as_read(self, user_id: str) -> int:
        """标记用户全部通知已读，返回本次新标记的条数"""
        updated = 0
        for notification in self._notifications.get(user_id, []):
            if not notification.is_read:
                notification.is_read = True
                updated += 1
        return updated

    def delete_notification(self, user_id: str, notification_id: str) -> bool:
        items = self._notifications.get(user_id, [])
        remaining = [n for n in items if n.notification_id != notification_id]
        if len(remaining) == len(items):
            return False
        self._notifications[user_id] = remaining
        return True

    def clear_all(self, user_id: str) -> int:
        """清空用户全部通知，返回删除条数"""
        return len(self._notifications.pop(user_id, []))

    def _add(self, notification: Notification) -> None:
        items = self._notifications.setdefault(notification.user_id, [])
        items.insert(0, notification)
        if len(items) > self._limit:
            # 淘汰最旧的
            del items[self._limit :]

        log.debug(
            "notification_created",
            user_id=notification.user_id,
            notification_id=notification.notification_id,
            kind=notification.kind.value,
        )
