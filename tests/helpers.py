"""测试辅助工具 -- 可控时钟、事件记录器、TaskDraft 构造"""

from datetime import UTC, datetime, timedelta

from tasktrack.models import TaskDraft

# 2026-03-11 是周三，ISO 周 2026-W11
BASE_TIME = datetime(2026, 3, 11, 10, 0, tzinfo=UTC)


class FrozenClock:
    """可手动推进的时钟"""

    def __init__(self, now: datetime = BASE_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


class EventRecorder:
    """记录收到的事件，用作订阅者"""

    def __init__(self) -> None:
        self.events = []

    def __call__(self, event) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> list[str]:
        return [e.kind.value for e in self.events]


def make_draft(title: str = "Task", created_by: str = "u1", **kwargs) -> TaskDraft:
    """构造 TaskDraft"""
    return TaskDraft(title=title, created_by=created_by, **kwargs)
