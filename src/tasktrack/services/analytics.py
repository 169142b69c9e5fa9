"""AnalyticsService -- 活动日志 + 分桶统计

三组并行分桶计数（日 / ISO 周 / 月），桶标识由事件时间推导：
- 日: YYYY-MM-DD
- 周: YYYY-Www（ISO 8601 周，年份为 ISO 年）
- 月: YYYY-MM
每个桶记录 created / completed / deleted 计数。全局和按用户各维护一份。
活动日志记录所有事件，不设上限。
"""

from datetime import UTC, datetime, timedelta

import structlog

from ..clock import Clock, utc_now
from ..models.analytics import ActivityEntry, TaskMetrics
from ..models.enums import ChangeKind, MetricsPeriod
from ..models.event import TaskChangeEvent
from ..store.event_bus import EventBus

log = structlog.get_logger()

_ACTIONS: dict[ChangeKind, str] = {
    ChangeKind.CREATED: "created",
    ChangeKind.UPDATED: "updated",
    ChangeKind.COMPLETED: "completed",
    ChangeKind.DELETED: "deleted",
    ChangeKind.DEADLINE_APPROACHING: "deadline approaching",
    ChangeKind.ASSIGNED: "assigned",
    ChangeKind.COMMENT_ADDED: "comment added",
    ChangeKind.SUBTASK_ADDED: "subtask added",
    ChangeKind.SUBTASK_COMPLETED: "subtask completed",
    ChangeKind.SUBTASK_DELETED: "subtask deleted",
}


def day_key(moment: datetime) -> str:
    return moment.astimezone(UTC).date().isoformat()


def week_key(moment: datetime) -> str:
    iso_year, iso_week, _ = moment.astimezone(UTC).date().isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def month_key(moment: datetime) -> str:
    return moment.astimezone(UTC).strftime("%Y-%m")


class MetricsBuckets:
    """日 / 周 / 月三组分桶计数"""

    def __init__(self) -> None:
        self.daily: dict[str, TaskMetrics] = {}
        self.weekly: dict[str, TaskMetrics] = {}
        self.monthly: dict[str, TaskMetrics] = {}

    def record(self, kind: ChangeKind, moment: datetime) -> None:
        for buckets, key in (
            (self.daily, day_key(moment)),
            (self.weekly, week_key(moment)),
            (self.monthly, month_key(moment)),
        ):
            metrics = buckets.get(key)
            if metrics is None:
                metrics = buckets[key] = TaskMetrics(period=key)

            if kind == ChangeKind.CREATED:
                metrics.tasks_created += 1
            elif kind == ChangeKind.COMPLETED:
                metrics.tasks_completed += 1
            elif kind == ChangeKind.DELETED:
                metrics.tasks_deleted += 1

    def for_period(self, period: MetricsPeriod) -> dict[str, TaskMetrics]:
        return {
            MetricsPeriod.DAY: self.daily,
            MetricsPeriod.WEEK: self.weekly,
            MetricsPeriod.MONTH: self.monthly,
        }[period]


class AnalyticsService:
    """统计派生状态服务"""

    def __init__(
        self,
        bus: EventBus,
        clock: Clock = utc_now,
        recent_activity_limit: int = 50,
        productivity_days: int = 7,
    ) -> None:
        self._clock = clock
        self._recent_activity_limit = recent_activity_limit
        self._productivity_days = productivity_days
        self._activity_log: list[ActivityEntry] = []
        self._buckets = MetricsBuckets()
        self._user_buckets: dict[str, MetricsBuckets] = {}
        self._bus = bus
        bus.subscribe(self.handle_event)

    def detach(self) -> None:
        self._bus.unsubscribe(self.handle_event)

    def handle_event(self, event: TaskChangeEvent) -> None:
        """事件订阅入口：记录活动日志并更新分桶计数"""
        now = self._clock()
        user_id = event.user_id
        action = _ACTIONS[event.kind]

        self._activity_log.append(
            ActivityEntry(
                task_id=event.task.task_id,
                task_title=event.task.title,
                action=action,
                timestamp=now,
                user_id=user_id,
            )
        )
        log.debug("activity_logged", user_id=user_id, action=action, task_id=event.task.task_id)

        self._buckets.record(event.kind, now)
        user_buckets = self._user_buckets.get(user_id)
        if user_buckets is None:
            user_buckets = self._user_buckets[user_id] = MetricsBuckets()
        user_buckets.record(event.kind, now)

    # ---- 活动日志 ----

    def get_recent_activity(
        self,
        limit: int | None = None,
        user_id: str | None = None,
    ) -> list[ActivityEntry]:
        """最近的 N 条活动，最新在前；时间相同时后记录的在前"""
        limit = limit if limit is not None else self._recent_activity_limit
        entries = [
            e for e in reversed(self._activity_log) if user_id is None or e.user_id == user_id
        ]
        entries.sort(key=lambda e: e.timestamp, reverse=True)
        return [e.model_copy() for e in entries[:limit]]

    # ---- 分桶统计 ----

    def get_daily_metrics(
        self,
        date: str | None = None,
        end_date: str | None = None,
    ) -> list[TaskMetrics]:
        """日统计

        - 无参数：全部日桶，按日期倒序
        - 只给 date：该日（不存在时为空列表）
        - date + end_date：闭区间内的日桶，按日期正序
        """
        daily = self._buckets.daily
        if date is None:
            return _sorted_copies(daily, descending=True)
        if end_date is None:
            return _single(daily, date)
        in_range = {key: m for key, m in daily.items() if date <= key <= end_date}
        return _sorted_copies(in_range, descending=False)

    def get_weekly_metrics(self, week: str | None = None) -> list[TaskMetrics]:
        if week is None:
            return _sorted_copies(self._buckets.weekly, descending=True)
        return _single(self._buckets.weekly, week)

    def get_monthly_metrics(self, month: str | None = None) -> list[TaskMetrics]:
        if month is None:
            return _sorted_copies(self._buckets.monthly, descending=True)
        return _single(self._buckets.monthly, month)

    def get_completion_rate(
        self,
        period: MetricsPeriod,
        identifier: str | None = None,
    ) -> float:
        """completed / created * 100；桶不存在或 created 为 0 时返回 0

        identifier 为空时取当前时间所在的桶。

        Raises:
            ValueError: period 不是合法的 MetricsPeriod
        """
        period = MetricsPeriod(period)
        if identifier is None:
            now = self._clock()
            identifier = {
                MetricsPeriod.DAY: day_key,
                MetricsPeriod.WEEK: week_key,
                MetricsPeriod.MONTH: month_key,
            }[period](now)

        metrics = self._buckets.for_period(period).get(identifier)
        if metrics is None or metrics.tasks_created == 0:
            return 0.0
        return metrics.tasks_completed / metrics.tasks_created * 100

    def get_productivity_score(
        self,
        user_id: str | None = None,
        days: int | None = None,
    ) -> float:
        """滚动窗口生产力评分（0-100）

        窗口为包含今天在内的最近 days 个自然日（UTC），
        评分 = 窗口内 completed 总数 / created 总数 * 100，created 为 0 时返回 0。
        user_id 为空时使用全局统计。
        """
        days = days if days is not None else self._productivity_days
        if user_id is None:
            daily = self._buckets.daily
        else:
            buckets = self._user_buckets.get(user_id)
            if buckets is None:
                return 0.0
            daily = buckets.daily

        today = self._clock().astimezone(UTC).date()
        total_created = 0
        total_completed = 0
        for offset in range(days):
            metrics = daily.get((today - timedelta(days=offset)).isoformat())
            if metrics is not None:
                total_created += metrics.tasks_created
                total_completed += metrics.tasks_completed

        if total_created == 0:
            return 0.0
        return total_completed / total_created * 100


def _single(buckets: dict[str, TaskMetrics], key: str) -> list[TaskMetrics]:
    metrics = buckets.get(key)
    return [metrics.model_copy()] if metrics else []


def _sorted_copies(buckets: dict[str, TaskMetrics], descending: bool) -> list[TaskMetrics]:
    return [buckets[key].model_copy() for key in sorted(buckets, reverse=descending)]
