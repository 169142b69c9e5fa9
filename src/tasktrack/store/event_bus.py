"""EventBus -- 内存中同步事件分发器

订阅者是接收 TaskChangeEvent 的回调，按注册顺序同步调用。
- subscribe 幂等：同一回调重复注册只保留一份
- unsubscribe 对未注册的回调是安全的空操作
"""

from collections.abc import Callable

import structlog

from ..models.event import TaskChangeEvent

log = structlog.get_logger()

TaskEventHandler = Callable[[TaskChangeEvent], None]


class EventBus:
    """任务变更事件总线 -- 发布/订阅模式"""

    def __init__(self, isolate_errors: bool = False) -> None:
        """
        Args:
            isolate_errors: False（默认）时订阅者异常直接抛出，中断本次分发；
                True 时记录 observer_failed 日志并继续通知后续订阅者
        """
        self._handlers: list[TaskEventHandler] = []
        self._isolate_errors = isolate_errors

    def subscribe(self, handler: TaskEventHandler) -> None:
        """注册订阅者（幂等）"""
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: TaskEventHandler) -> None:
        """取消订阅，未注册时忽略"""
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def publish(self, event: TaskChangeEvent) -> None:
        """按注册顺序同步通知所有订阅者

        分发前对订阅者列表做快照，订阅者在回调中增删订阅不影响本次分发。
        """
        for handler in list(self._handlers):
            if not self._isolate_errors:
                handler(event)
                continue
            try:
                handler(event)
            except Exception as e:
                log.exception(
                    "observer_failed",
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    event_id=event.event_id,
                    kind=event.kind.value,
                    error_type=type(e).__name__,
                )
