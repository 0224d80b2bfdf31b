"""
Configuration Management

Pydantic-settings based configuration for the pending order monitor.
All settings can be overridden via environment variables.

Settings are resolved once at process start by the entry point and
handed to components explicitly; nothing below the entry point reads
the environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with ORDER_MONITOR_ and are case-insensitive.
    Example: ORDER_MONITOR_PENDING_THRESHOLD_DAYS=5

    The webhook URL also accepts the unprefixed SLACK_WEBHOOK_URL and
    SLACK_ORDER_WEBHOOK_URL names.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDER_MONITOR_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Order Store Configuration
    database_url: str = Field(
        default="sqlite:///ecommerce.db",
        description="SQLAlchemy database URL for the order store",
    )
    ensure_schema: bool = Field(
        default=True,
        description="Create the orders/customers tables before querying if missing",
    )

    # Staleness Configuration
    pending_threshold_days: int = Field(
        default=3,
        gt=0,
        description="Days an order may stay unfulfilled before it is alerted on",
    )
    critical_threshold_days: int | None = Field(
        default=None,
        gt=0,
        description="Days pending at which an alert is tagged as danger instead of warning",
    )
    max_orders_per_run: int | None = Field(
        default=None,
        gt=0,
        description="Upper bound on orders read per run (unbounded when unset)",
    )

    # Slack Webhook Configuration
    slack_webhook_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ORDER_MONITOR_SLACK_WEBHOOK_URL",
            "SLACK_WEBHOOK_URL",
            "SLACK_ORDER_WEBHOOK_URL",
        ),
        description="Incoming webhook URL; alerts are skipped when unset",
    )
    slack_channel: str = Field(
        default="#order-alerts",
        description="Channel the webhook message targets",
    )
    slack_username: str = Field(
        default="OrderMonitor",
        description="Sender name shown on the webhook message",
    )
    alert_title: str = Field(
        default=":rotating_light: Pending Orders Requiring Follow-up",
        description="Top-level message text",
    )
    alert_footer: str = Field(
        default="E-commerce Order Monitor",
        description="Footer shown on every attachment",
    )
    webhook_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for the outbound webhook request",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def engine_config(self) -> dict:
        """Keyword arguments for sqlalchemy.create_engine."""
        config: dict = {}
        if not self.database_url.startswith("sqlite"):
            config["pool_pre_ping"] = True
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call Settings.model_validate({}) in tests to override.
    """
    return Settings()
