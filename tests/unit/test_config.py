"""
Unit tests for settings resolution.
"""

import pytest
from pydantic import ValidationError

from order_monitor.shared.config import Settings, get_settings
from order_monitor.shared.tools.slack import SlackWebhookDispatcher


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ORDER_MONITOR_SLACK_WEBHOOK_URL",
        "SLACK_WEBHOOK_URL",
        "SLACK_ORDER_WEBHOOK_URL",
        "ORDER_MONITOR_PENDING_THRESHOLD_DAYS",
        "ORDER_MONITOR_DATABASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///ecommerce.db"
        assert settings.pending_threshold_days == 3
        assert settings.critical_threshold_days is None
        assert settings.slack_webhook_url is None
        assert settings.slack_channel == "#order-alerts"
        assert settings.slack_username == "OrderMonitor"
        assert settings.ensure_schema is True

    def test_sqlite_engine_config(self):
        assert Settings(_env_file=None).engine_config == {}

    def test_server_engine_config(self):
        settings = Settings(_env_file=None, database_url="postgresql://u:p@db/orders")
        assert settings.engine_config == {"pool_pre_ping": True}


class TestEnvironment:
    def test_prefixed_threshold(self, monkeypatch):
        monkeypatch.setenv("ORDER_MONITOR_PENDING_THRESHOLD_DAYS", "5")
        assert Settings(_env_file=None).pending_threshold_days == 5

    @pytest.mark.parametrize(
        "name",
        ["ORDER_MONITOR_SLACK_WEBHOOK_URL", "SLACK_WEBHOOK_URL", "SLACK_ORDER_WEBHOOK_URL"],
    )
    def test_webhook_url_aliases(self, monkeypatch, name):
        monkeypatch.setenv(name, "https://hooks.example.com/abc")

        settings = Settings(_env_file=None)

        assert settings.slack_webhook_url == "https://hooks.example.com/abc"
        assert SlackWebhookDispatcher.from_settings(settings).is_configured is True

    def test_blank_webhook_not_configured(self, monkeypatch):
        monkeypatch.setenv("SLACK_WEBHOOK_URL", "   ")
        assert SlackWebhookDispatcher.from_settings(Settings(_env_file=None)).is_configured is False

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestValidation:
    @pytest.mark.parametrize("value", ["0", "-1", "abc"])
    def test_invalid_threshold(self, monkeypatch, value):
        monkeypatch.setenv("ORDER_MONITOR_PENDING_THRESHOLD_DAYS", value)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, webhook_timeout_seconds=0)
