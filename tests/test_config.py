"""TaskTrackConfig + load_config 单元测试

验证默认值、环境变量映射与非法值回退。
"""

import pytest
from pydantic import ValidationError
from tasktrack.config import TaskTrackConfig, load_config

_ENV_VARS = [
    "TASKTRACK_NOTIFICATION_LIMIT",
    "TASKTRACK_DEADLINE_THRESHOLD_HOURS",
    "TASKTRACK_RECENT_ACTIVITY_LIMIT",
    "TASKTRACK_PRODUCTIVITY_DAYS",
    "TASKTRACK_PAGE_SIZE",
    "TASKTRACK_ISOLATE_OBSERVER_ERRORS",
    "TASKTRACK_LOG_FORMAT",
    "TASKTRACK_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """清除相关环境变量"""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestTaskTrackConfig:
    """TaskTrackConfig 数据模型测试"""

    def test_default_values(self):
        config = TaskTrackConfig()
        assert config.notification_limit == 100
        assert config.deadline_threshold_hours == 24
        assert config.recent_activity_limit == 50
        assert config.productivity_days == 7
        assert config.page_size == 10
        assert config.isolate_observer_errors is False
        assert config.log_format == "dev"
        assert config.log_level == "INFO"

    @pytest.mark.parametrize("field", ["notification_limit", "page_size", "productivity_days"])
    def test_min_value(self, field):
        with pytest.raises(ValidationError):
            TaskTrackConfig(**{field: 0})


class TestLoadConfig:
    """load_config() 环境变量映射测试"""

    def test_default_when_no_env(self):
        assert load_config() == TaskTrackConfig()

    def test_int_values_from_env(self, monkeypatch):
        monkeypatch.setenv("TASKTRACK_NOTIFICATION_LIMIT", "20")
        monkeypatch.setenv("TASKTRACK_DEADLINE_THRESHOLD_HOURS", "48")
        monkeypatch.setenv("TASKTRACK_PAGE_SIZE", "25")

        config = load_config()
        assert config.notification_limit == 20
        assert config.deadline_threshold_hours == 48
        assert config.page_size == 25

    @pytest.mark.parametrize("value", ["abc", "0", "-5", "1.5"])
    def test_invalid_int_falls_back_to_default(self, monkeypatch, value):
        """非法值回退到默认值，不阻塞启动"""
        monkeypatch.setenv("TASKTRACK_PRODUCTIVITY_DAYS", value)
        assert load_config().productivity_days == 7

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1", True), ("true", True), ("YES", True), ("on", True), ("0", False), ("no", False)],
    )
    def test_isolate_observer_errors(self, monkeypatch, value, expected):
        monkeypatch.setenv("TASKTRACK_ISOLATE_OBSERVER_ERRORS", value)
        assert load_config().isolate_observer_errors is expected

    def test_log_settings_from_env(self, monkeypatch):
        """日志配置不区分大小写"""
        monkeypatch.setenv("TASKTRACK_LOG_FORMAT", "JSON")
        monkeypatch.setenv("TASKTRACK_LOG_LEVEL", "warning")

        config = load_config()
        assert config.log_format == "json"
        assert config.log_level == "WARNING"

    @pytest.mark.parametrize(
        ("env_var", "value", "field", "default"),
        [
            ("TASKTRACK_LOG_FORMAT", "xml", "log_format", "dev"),
            ("TASKTRACK_LOG_LEVEL", "verbose", "log_level", "INFO"),
        ],
    )
    def test_invalid_log_setting_falls_back(self, monkeypatch, env_var, value, field, default):
        monkeypatch.setenv(env_var, value)
        assert getattr(load_config(), field) == default

    def test_invalid_log_level_rejected_by_model(self):
        with pytest.raises(ValidationError):
            TaskTrackConfig(log_level="verbose")
