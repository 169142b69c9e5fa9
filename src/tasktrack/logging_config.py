"""structlog 配置模块

渲染模式与日志级别取自 TaskTrackConfig（log_format / log_level），
环境变量只在 config.load_config() 中解析。
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .config import LogFormat, TaskTrackConfig, load_config

APP_NAME = "tasktrack"


def _add_app_name(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    """为每条日志标记来源应用"""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _shared_processors(log_format: LogFormat) -> list[Processor]:
    """structlog 与标准库 logging 共用的处理器链"""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_app_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format == "json":
        # JSON 中异常以字符串字段输出；dev 模式交给 ConsoleRenderer 美化
        processors.append(structlog.processors.format_exc_info)
    return processors


def build_renderer(log_format: LogFormat) -> Processor:
    """按渲染模式构造最终 renderer"""
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging(config: TaskTrackConfig | None = None) -> None:
    """初始化 structlog 与根 logger

    Args:
        config: 运行配置，缺省时调用 load_config() 从环境变量加载
    """
    config = config or load_config()
    shared = _shared_processors(config.log_format)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=build_renderer(config.log_format),
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(config.log_level)

    structlog.get_logger().debug(
        "logging_configured",
        log_format=config.log_format,
        log_level=config.log_level,
    )
