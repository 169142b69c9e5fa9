"""TaskTrackConfig -- 运行配置加载

从环境变量加载配置，未设置或无法解析时使用默认值。
"""

import os
from typing import Literal, get_args

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

_TRUE_VALUES = {"1", "true", "yes", "on"}

LogFormat = Literal["dev", "json"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class TaskTrackConfig(BaseModel):
    """tasktrack 配置 -- 从环境变量加载

    环境变量:
        TASKTRACK_NOTIFICATION_LIMIT: 每用户通知保留条数（默认 100）
        TASKTRACK_DEADLINE_THRESHOLD_HOURS: 截止提醒窗口（小时，默认 24）
        TASKTRACK_RECENT_ACTIVITY_LIMIT: 最近活动默认条数（默认 50）
        TASKTRACK_PRODUCTIVITY_DAYS: 生产力评分窗口（天，默认 7）
        TASKTRACK_PAGE_SIZE: 任务列表分页大小（默认 10）
        TASKTRACK_ISOLATE_OBSERVER_ERRORS: 订阅者异常是否隔离（默认 false）
        TASKTRACK_LOG_FORMAT: 日志渲染模式 dev / json（默认 dev）
        TASKTRACK_LOG_LEVEL: 日志级别（默认 INFO，不区分大小写）
    """

    notification_limit: int = Field(
        default=100,
        ge=1,
        description="每用户通知保留条数，超出时淘汰最旧的",
    )
    deadline_threshold_hours: int = Field(
        default=24,
        ge=1,
        description="截止提醒窗口（小时）",
    )
    recent_activity_limit: int = Field(
        default=50,
        ge=1,
        description="最近活动默认返回条数",
    )
    productivity_days: int = Field(
        default=7,
        ge=1,
        description="生产力评分滚动窗口（天）",
    )
    page_size: int = Field(
        default=10,
        ge=1,
        description="任务列表分页大小",
    )
    isolate_observer_errors: bool = Field(
        default=False,
        description="True 时订阅者异常只记录日志，不中断分发",
    )
    log_format: LogFormat = Field(
        default="dev",
        description="日志渲染模式: dev 为可读输出，json 为结构化输出",
    )
    log_level: LogLevel = Field(
        default="INFO",
        description="根 logger 级别",
    )


_INT_ENV_VARS = {
    "TASKTRACK_NOTIFICATION_LIMIT": "notification_limit",
    "TASKTRACK_DEADLINE_THRESHOLD_HOURS": "deadline_threshold_hours",
    "TASKTRACK_RECENT_ACTIVITY_LIMIT": "recent_activity_limit",
    "TASKTRACK_PRODUCTIVITY_DAYS": "productivity_days",
    "TASKTRACK_PAGE_SIZE": "page_size",
}

# 环境变量 -> (字段名, 合法取值, 归一化函数)
_CHOICE_ENV_VARS = {
    "TASKTRACK_LOG_FORMAT": ("log_format", get_args(LogFormat), str.lower),
    "TASKTRACK_LOG_LEVEL": ("log_level", get_args(LogLevel), str.upper),
}


def load_config() -> TaskTrackConfig:
    """从环境变量加载配置

    Returns:
        TaskTrackConfig 实例
    """
    kwargs: dict = {}
    defaults = TaskTrackConfig()

    for env_var, field_name in _INT_ENV_VARS.items():
        if val := os.environ.get(env_var):
            try:
                parsed = int(val)
            except ValueError:
                parsed = None
            if parsed is None or parsed < 1:
                log.warning(
                    "invalid_int_config",
                    env_var=env_var,
                    value=val,
                    fallback=getattr(defaults, field_name),
                )
                # 使用默认值，不阻塞启动
                continue
            kwargs[field_name] = parsed

    for env_var, (field_name, choices, normalize) in _CHOICE_ENV_VARS.items():
        if val := os.environ.get(env_var):
            normalized = normalize(val.strip())
            if normalized not in choices:
                log.warning(
                    "invalid_choice_config",
                    env_var=env_var,
                    value=val,
                    choices=list(choices),
                    fallback=getattr(defaults, field_name),
                )
                continue
            kwargs[field_name] = normalized

    if val := os.environ.get("TASKTRACK_ISOLATE_OBSERVER_ERRORS"):
        kwargs["isolate_observer_errors"] = val.strip().lower() in _TRUE_VALUES

    return TaskTrackConfig(**kwargs)
