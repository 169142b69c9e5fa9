"""GamificationService 单元测试

验证积分规则、等级、连续天数、成就（基于真实计数）与读接口。
"""

from datetime import timedelta

import pytest
from helpers import BASE_TIME, make_draft
from tasktrack.models.gamification import (
    DEADLINE_CRUSHER,
    FIRST_TASK,
    ORGANIZATION_PRO,
    STREAK_3,
    STREAK_7,
    TASK_MASTER,
)
from tasktrack.services.gamification import (
    LEVEL_THRESHOLDS,
    GamificationService,
    calculate_level,
)


@pytest.fixture
def game(bus, clock) -> GamificationService:
    return GamificationService(bus, clock=clock)


def _ids(achievements) -> list[str]:
    return [a.achievement_id for a in achievements]


class TestCalculateLevel:
    """等级计算测试"""

    @pytest.mark.parametrize(
        ("points", "level"),
        [
            (0, 1),
            (99, 1),
            (100, 2),
            (249, 2),
            (250, 3),
            (9999, 9),
            (10000, 10),
            (50000, 10),
        ],
    )
    def test_level_for_points(self, points, level):
        assert calculate_level(points) == level


class TestPoints:
    """积分规则测试"""

    def test_create_awards_points_and_first_task(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))

        assert game.get_user_points("u1") == 5
        assert _ids(game.get_user_achievements("u1")) == [FIRST_TASK]

    def test_create_and_complete_before_deadline(self, store, game):
        """创建 5 + 完成 10 + 按期 15 = 30，等级 1"""
        task = store.create_task(
            make_draft("A", created_by="u1", due_date=BASE_TIME + timedelta(days=1))
        )
        store.complete_task(task.task_id)

        assert game.get_user_points("u1") == 30
        assert game.get_user_level("u1") == 1

    def test_complete_after_deadline_gets_no_bonus(self, store, game):
        task = store.create_task(
            make_draft("A", created_by="u1", due_date=BASE_TIME - timedelta(hours=1))
        )
        store.complete_task(task.task_id)
        assert game.get_user_points("u1") == 15

    def test_complete_without_due_date(self, store, game):
        task = store.create_task(make_draft("A", created_by="u1"))
        store.complete_task(task.task_id)
        assert game.get_user_points("u1") == 15

    def test_subtask_points(self, store, game):
        task = store.create_task(make_draft("A", created_by="u1"))
        updated = store.add_subtask(task.task_id, "s1")
        store.toggle_subtask(task.task_id, updated.subtasks[0].subtask_id)
        # 5 + 2 + 3
        assert game.get_user_points("u1") == 10

    def test_updated_and_deleted_award_nothing(self, store, game):
        task = store.create_task(make_draft("A", created_by="u1"))
        store.assign_task(task.task_id, "u2")
        store.add_comment(task.task_id, "u2", "hi")
        store.delete_task(task.task_id)
        assert game.get_user_points("u1") == 5

    def test_points_are_per_owner(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        store.create_task(make_draft("B", created_by="u2"))
        store.create_task(make_draft("C", created_by="u2"))

        assert game.get_user_points("u1") == 5
        assert game.get_user_points("u2") == 10

    def test_achievement_points_not_added(self, store, game):
        """解锁成就不增加用户积分"""
        store.create_task(make_draft("A", created_by="u1"))
        assert game.get_user_points("u1") == 5

    def test_level_up(self, store, game):
        # 每个任务 5 + 10 + 15 = 30，4 个任务 = 120
        for index in range(4):
            task = store.create_task(
                make_draft(f"T{index}", created_by="u1", due_date=BASE_TIME + timedelta(days=1))
            )
            store.complete_task(task.task_id)

        assert game.get_user_points("u1") == 120
        assert game.get_user_level("u1") == 2


class TestStreak:
    """连续活跃天数测试"""

    def test_first_activity_starts_streak(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        assert game.get_user_streak("u1") == 1

    def test_same_day_activity_keeps_streak(self, store, game, clock):
        store.create_task(make_draft("A", created_by="u1"))
        clock.advance(hours=5)
        store.create_task(make_draft("B", created_by="u1"))
        assert game.get_user_streak("u1") == 1

    def test_next_day_increments_with_bonus(self, store, game, clock):
        store.create_task(make_draft("A", created_by="u1"))
        clock.advance(days=1)
        store.create_task(make_draft("B", created_by="u1"))

        assert game.get_user_streak("u1") == 2
        # 5 + 5 + 连续奖励 5
        assert game.get_user_points("u1") == 15

    def test_gap_resets_streak(self, store, game, clock):
        store.create_task(make_draft("A", created_by="u1"))
        clock.advance(days=1)
        store.create_task(make_draft("B", created_by="u1"))
        clock.advance(days=2)
        store.create_task(make_draft("C", created_by="u1"))
        assert game.get_user_streak("u1") == 1

    def test_streak_3_awarded_exactly_at_three(self, store, game, clock):
        store.create_task(make_draft("day1", created_by="u1"))
        clock.advance(days=1)
        store.create_task(make_draft("day2", created_by="u1"))
        assert STREAK_3 not in _ids(game.get_user_achievements("u1"))

        clock.advance(days=1)
        store.create_task(make_draft("day3", created_by="u1"))
        assert game.get_user_streak("u1") == 3
        assert STREAK_3 in _ids(game.get_user_achievements("u1"))

    def test_streak_7(self, store, game, clock):
        for day in range(7):
            store.create_task(make_draft(f"day{day}", created_by="u1"))
            clock.advance(days=1)

        achievements = _ids(game.get_user_achievements("u1"))
        assert game.get_user_streak("u1") == 7
        assert achievements == [FIRST_TASK, STREAK_3, STREAK_7]

    def test_streak_uses_utc_calendar_day(self, store, game, clock):
        """23:30 与次日 00:30 属于相邻两天"""
        clock.set(BASE_TIME.replace(hour=23, minute=30))
        store.create_task(make_draft("late", created_by="u1"))
        clock.advance(hours=1)
        store.create_task(make_draft("early", created_by="u1"))
        assert game.get_user_streak("u1") == 2

    def test_clock_rollback_keeps_streak(self, store, game, clock):
        """时钟回拨到上次活跃日之前，连续天数不变"""
        store.create_task(make_draft("day1", created_by="u1"))
        clock.advance(days=1)
        store.create_task(make_draft("day2", created_by="u1"))
        clock.advance(days=-3)
        store.create_task(make_draft("earlier", created_by="u1"))

        progress = game.get_user_progress("u1")
        assert progress.streak_days == 2
        assert progress.last_activity_date == (BASE_TIME + timedelta(days=1)).date()


class TestAchievements:
    """成就阈值基于真实计数"""

    def test_task_master_after_ten_completions(self, store, game):
        for index in range(10):
            task = store.create_task(make_draft(f"T{index}", created_by="u1"))
            assert TASK_MASTER not in _ids(game.get_user_achievements("u1"))
            store.complete_task(task.task_id)

        assert TASK_MASTER in _ids(game.get_user_achievements("u1"))
        assert game.get_user_progress("u1").tasks_completed == 10

    def test_deadline_crusher_counts_on_time_completions(self, store, game):
        for index in range(4):
            task = store.create_task(
                make_draft(f"T{index}", created_by="u1", due_date=BASE_TIME + timedelta(days=1))
            )
            store.complete_task(task.task_id)
        # 逾期完成不计入
        late = store.create_task(
            make_draft("late", created_by="u1", due_date=BASE_TIME - timedelta(days=1))
        )
        store.complete_task(late.task_id)
        assert DEADLINE_CRUSHER not in _ids(game.get_user_achievements("u1"))

        task = store.create_task(
            make_draft("T5", created_by="u1", due_date=BASE_TIME + timedelta(days=1))
        )
        store.complete_task(task.task_id)
        assert DEADLINE_CRUSHER in _ids(game.get_user_achievements("u1"))
        assert game.get_user_progress("u1").deadlines_met == 5

    def test_organization_pro_counts_distinct_tasks(self, store, game):
        """5 个不同任务各有 >= 3 个子任务"""
        tasks = [store.create_task(make_draft(f"T{i}", created_by="u1")) for i in range(5)]

        # 同一任务加很多子任务只算一个
        for _ in range(6):
            store.add_subtask(tasks[0].task_id, "step")
        assert ORGANIZATION_PRO not in _ids(game.get_user_achievements("u1"))

        for task in tasks[1:]:
            for _ in range(3):
                store.add_subtask(task.task_id, "step")

        assert ORGANIZATION_PRO in _ids(game.get_user_achievements("u1"))

    def test_achievement_awarded_once(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        store.create_task(make_draft("B", created_by="u1"))
        assert _ids(game.get_user_achievements("u1")).count(FIRST_TASK) == 1

    def test_unlocked_at_set(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        assert game.get_user_achievements("u1")[0].unlocked_at == BASE_TIME

    def test_all_achievements_merges_unlock_status(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        catalog = game.get_all_achievements("u1")

        assert len(catalog) == 6
        unlocked = [a.achievement_id for a in catalog if a.unlocked_at is not None]
        assert unlocked == [FIRST_TASK]

    def test_all_achievements_for_unknown_user(self, game):
        assert all(a.unlocked_at is None for a in game.get_all_achievements("nobody"))


class TestReads:
    """读接口测试"""

    def test_unknown_user_defaults(self, game):
        assert game.get_user_progress("nobody") is None
        assert game.get_user_points("nobody") == 0
        assert game.get_user_level("nobody") == 1
        assert game.get_user_streak("nobody") == 0
        assert game.get_user_achievements("nobody") == []

    def test_points_for_next_level_unknown_user(self, game):
        progress = game.get_points_for_next_level("nobody")
        assert (progress.current, progress.required, progress.next_level) == (0, 100, 2)

    def test_points_for_next_level(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        progress = game.get_points_for_next_level("u1")
        assert (progress.current, progress.required, progress.next_level) == (5, 100, 2)

    def test_points_for_next_level_pinned_at_max(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        # 直接把进度推到满级
        game._progress["u1"].points = LEVEL_THRESHOLDS[-1] + 500
        game._progress["u1"].level = len(LEVEL_THRESHOLDS)

        progress = game.get_points_for_next_level("u1")
        assert progress.current == progress.required == LEVEL_THRESHOLDS[-1] + 500
        assert progress.next_level == len(LEVEL_THRESHOLDS)

    def test_progress_snapshot_is_copy(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        snapshot = game.get_user_progress("u1")
        snapshot.points = 999
        assert game.get_user_points("u1") == 5

    def test_detach_stops_updates(self, store, game):
        store.create_task(make_draft("A", created_by="u1"))
        game.detach()
        store.create_task(make_draft("B", created_by="u1"))
        assert game.get_user_points("u1") == 5
