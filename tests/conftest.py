"""tasktrack 测试 fixtures -- 可控时钟 + 已组装的实例组"""

import logging

import pytest
import structlog
from helpers import EventRecorder, FrozenClock
from tasktrack.app import TaskTrackApp, create_app
from tasktrack.config import TaskTrackConfig
from tasktrack.store.event_bus import EventBus
from tasktrack.store.task_store import TaskStore


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(bus: EventBus) -> EventRecorder:
    """已订阅 bus 的事件记录器"""
    rec = EventRecorder()
    bus.subscribe(rec)
    return rec


@pytest.fixture
def store(bus: EventBus, clock: FrozenClock) -> TaskStore:
    return TaskStore(bus, clock=clock)


@pytest.fixture
def app(clock: FrozenClock) -> TaskTrackApp:
    """未预置数据的实例组（使用默认配置，不读环境变量）"""
    return create_app(config=TaskTrackConfig(), clock=clock)


@pytest.fixture
def restore_logging():
    """执行 setup_logging() 的测试结束后还原 structlog 与根 logger"""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield root_logger
    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
