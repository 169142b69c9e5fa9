"""GamificationService -- 积分、等级、连续天数、成就

订阅 TaskStore 事件，为每个用户维护 UserProgress。
每个事件的处理顺序：
1. 按事件类型加分 / 更新计数 / 检查成就
2. 更新连续活跃天数（所有事件类型都会触发）

成就阈值基于真实事件计数（完成数、按期完成数、子任务 >= 3 的任务数），
不从积分反推。
"""

import structlog

from ..clock import Clock, utc_now, utc_today
from ..models.enums import ChangeKind
from ..models.event import TaskChangeEvent
from ..models.gamification import (
    DEADLINE_CRUSHER,
    FIRST_TASK,
    ORGANIZATION_PRO,
    STREAK_3,
    STREAK_7,
    TASK_MASTER,
    Achievement,
    LevelProgress,
    UserProgress,
    default_achievements,
)
from ..models.task import Task
from ..store.event_bus import EventBus

log = structlog.get_logger()

# 积分规则
POINTS_TASK_CREATED = 5
POINTS_TASK_COMPLETED = 10
POINTS_SUBTASK_ADDED = 2
POINTS_SUBTASK_COMPLETED = 3
POINTS_DEADLINE_MET = 15
POINTS_STREAK_BONUS = 5

# 等级阈值：第 i 级（1-based）所需最低积分
LEVEL_THRESHOLDS: list[int] = [0, 100, 250, 500, 1000, 2000, 3500, 5000, 7500, 10000]

# 成就阈值
TASK_MASTER_COMPLETIONS = 10
DEADLINE_CRUSHER_COMPLETIONS = 5
ORGANIZATION_PRO_TASKS = 5
ORGANIZED_TASK_MIN_SUBTASKS = 3


def calculate_level(points: int) -> int:
    """阈值 <= points 的最高等级（1-based）"""
    level = 1
    for index, threshold in enumerate(LEVEL_THRESHOLDS):
        if points >= threshold:
            level = index + 1
    return level


class GamificationService:
    """游戏化派生状态服务"""

    def __init__(
        self,
        bus: EventBus,
        clock: Clock = utc_now,
        achievements: list[Achievement] | None = None,
    ) -> None:
        self._clock = clock
        self._progress: dict[str, UserProgress] = {}
        catalog = achievements if achievements is not None else default_achievements()
        self._catalog: dict[str, Achievement] = {a.achievement_id: a for a in catalog}
        self._bus = bus
        bus.subscribe(self.handle_event)

    def detach(self) -> None:
        """取消订阅，已累积的进度保留"""
        self._bus.unsubscribe(self.handle_event)

    def handle_event(self, event: TaskChangeEvent) -> None:
        """事件订阅入口"""
        progress = self._get_or_create(event.user_id)
        task = event.task

        if event.kind == ChangeKind.CREATED:
            self._on_task_created(progress)
        elif event.kind == ChangeKind.COMPLETED:
            self._on_task_completed(progress, task)
        elif event.kind == ChangeKind.SUBTASK_ADDED:
            self._on_subtask_added(progress, task)
        elif event.kind == ChangeKind.SUBTASK_COMPLETED:
            self._add_points(progress, POINTS_SUBTASK_COMPLETED)

        self._update_streak(progress)

    # ---- 读操作 ----

    def get_user_progress(self, user_id: str) -> UserProgress | None:
        progress = self._progress.get(user_id)
        return progress.model_copy(deep=True) if progress else None

    def get_user_achievements(self, user_id: str) -> list[Achievement]:
        """用户已解锁的成就（按解锁顺序）"""
        progress = self._progress.get(user_id)
        if progress is None:
            return []
        return [a.model_copy() for a in progress.achievements]

    def get_all_achievements(self, user_id: str) -> list[Achievement]:
        """完整成就目录，已解锁的条目带 unlocked_at"""
        progress = self._progress.get(user_id)
        unlocked = {a.achievement_id: a for a in progress.achievements} if progress else {}
        return [
            unlocked.get(achievement_id, template).model_copy()
            for achievement_id, template in self._catalog.items()
        ]

    def get_user_streak(self, user_id: str) -> int:
        progress = self._progress.get(user_id)
        return progress.streak_days if progress else 0

    def get_user_level(self, user_id: str) -> int:
        progress = self._progress.get(user_id)
        return progress.level if progress else 1

    def get_user_points(self, user_id: str) -> int:
        progress = self._progress.get(user_id)
        return progress.points if progress else 0

    def get_points_for_next_level(self, user_id: str) -> LevelProgress:
        """距离下一等级的进度；满级后 required/next_level 固定为当前值

        未知用户视为 1 级、0 积分。
        """
        points = self.get_user_points(user_id)
        level = self.get_user_level(user_id)

        if level >= len(LEVEL_THRESHOLDS):
            return LevelProgress(current=points, required=points, next_level=level)

        return LevelProgress(
            current=points,
            required=LEVEL_THRESHOLDS[level],
            next_level=level + 1,
        )

    # ---- 事件处理 ----

    def _on_task_created(self, progress: UserProgress) -> None:
        progress.tasks_created += 1
        self._add_points(progress, POINTS_TASK_CREATED)
        self._award(progress, FIRST_TASK)

    def _on_task_completed(self, progress: UserProgress, task: Task) -> None:
        progress.tasks_completed += 1
        self._add_points(progress, POINTS_TASK_COMPLETED)

        # 截止时间仍在未来 -> 按期完成奖励
        if task.due_date is not None and task.due_date > self._clock():
            progress.deadlines_met += 1
            self._add_points(progress, POINTS_DEADLINE_MET)
            if progress.deadlines_met >= DEADLINE_CRUSHER_COMPLETIONS:
                self._award(progress, DEADLINE_CRUSHER)

        if progress.tasks_completed >= TASK_MASTER_COMPLETIONS:
            self._award(progress, TASK_MASTER)

    def _on_subtask_added(self, progress: UserProgress, task: Task) -> None:
        self._add_points(progress, POINTS_SUBTASK_ADDED)

        if len(task.subtasks) >= ORGANIZED_TASK_MIN_SUBTASKS:
            progress.organized_task_ids.add(task.task_id)
            if len(progress.organized_task_ids) >= ORGANIZATION_PRO_TASKS:
                self._award(progress, ORGANIZATION_PRO)

    def _update_streak(self, progress: UserProgress) -> None:
        """更新连续活跃天数

        - 上次活跃是今天或之后（时钟回拨）：不变
        - 上次活跃是昨天：+1，恰好到 3/7 天时授予成就，并奖励积分
        - 其他情况（首次活跃或中断）：重置为 1
        """
        today = utc_today(self._clock)
        last = progress.last_activity_date

        if last is not None and last >= today:
            return

        if last is not None and (today - last).days == 1:
            progress.streak_days += 1
            if progress.streak_days == 3:
                self._award(progress, STREAK_3)
            elif progress.streak_days == 7:
                self._award(progress, STREAK_7)
            self._add_points(progress, POINTS_STREAK_BONUS)
        else:
            progress.streak_days = 1

        progress.last_activity_date = today

    # ---- 内部 ----

    def _get_or_create(self, user_id: str) -> UserProgress:
        progress = self._progress.get(user_id)
        if progress is None:
            progress = UserProgress(user_id=user_id)
            self._progress[user_id] = progress
        return progress

    def _add_points(self, progress: UserProgress, points: int) -> None:
        progress.points += points
        new_level = calculate_level(progress.points)
        if new_level > progress.level:
            progress.level = new_level
            log.info("level_up", user_id=progress.user_id, level=new_level)

    def _award(self, progress: UserProgress, achievement_id: str) -> None:
        """授予成就（每个用户每个成就至多一次）"""
        if progress.has_achievement(achievement_id):
            return

        template = self._catalog.get(achievement_id)
        if template is None:
            log.warning("unknown_achievement", achievement_id=achievement_id)
            return

        progress.achievements.append(template.model_copy(update={"unlocked_at": self._clock()}))
        log.info(
            "achievement_unlocked",
            user_id=progress.user_id,
            achievement_id=achievement_id,
        )
