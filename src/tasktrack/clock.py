"""时钟抽象

所有服务通过注入的 Clock 获取当前时间（UTC aware datetime），
测试可替换为可控时钟。
"""

from collections.abc import Callable
from datetime import UTC, date, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """当前 UTC 时间"""
    return datetime.now(UTC)


def utc_today(clock: Clock = utc_now) -> date:
    """当前 UTC 日期"""
    return clock().astimezone(UTC).date()
