"""
Pytest Configuration and Shared Fixtures

Provides a temporary SQLite order store, seeded order helpers, settings
and a fake webhook transport that records every request.
"""

import os
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

# Set test environment before importing application modules
os.environ["ORDER_MONITOR_ENVIRONMENT"] = "development"
os.environ["ORDER_MONITOR_LOG_LEVEL"] = "DEBUG"
for _name in ("SLACK_WEBHOOK_URL", "SLACK_ORDER_WEBHOOK_URL", "ORDER_MONITOR_SLACK_WEBHOOK_URL"):
    os.environ.pop(_name, None)

from order_monitor.shared.config import Settings
from order_monitor.shared.models.orders import Order
from order_monitor.shared.order_status import OrderStatus
from order_monitor.shared.tools.schema import customers, ensure_schema, orders
from tests.utils.order_generator import MockOrderGenerator
from tests.utils.webhook import WEBHOOK_URL, RecordingTransport


# --- Time Fixtures ---


@pytest.fixture
def frozen_time() -> int:
    """Fixed Unix timestamp for deterministic tests."""
    return 1738800000  # 2025-02-06 00:00:00 UTC


@pytest.fixture
def frozen_datetime(frozen_time: int) -> datetime:
    """Fixed datetime for deterministic tests."""
    return datetime.fromtimestamp(frozen_time, tz=timezone.utc)


# --- Settings Fixtures ---


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'orders.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    """Settings with a webhook configured and no .env lookups."""
    return Settings(
        _env_file=None,
        database_url=database_url,
        slack_webhook_url=WEBHOOK_URL,
        pending_threshold_days=3,
    )


@pytest.fixture
def unconfigured_settings(database_url: str) -> Settings:
    """Settings without a webhook URL."""
    return Settings(_env_file=None, database_url=database_url)


# --- Order Store Fixtures ---


@pytest.fixture
def engine(database_url: str) -> Generator[Engine, None, None]:
    """SQLite engine on a temp file with the schema provisioned."""
    engine = create_engine(database_url)
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def connection(engine: Engine) -> Generator[Connection, None, None]:
    with engine.connect() as conn:
        yield conn


@pytest.fixture
def order_generator() -> MockOrderGenerator:
    return MockOrderGenerator(seed=42)


@pytest.fixture
def seed_orders(connection: Connection) -> Callable[[list[dict], list[dict]], None]:
    """Insert customer and order rows through the test connection."""

    def _seed(customer_rows: list[dict], order_rows: list[dict]) -> None:
        if customer_rows:
            connection.execute(customers.insert(), customer_rows)
        if order_rows:
            connection.execute(orders.insert(), order_rows)
        connection.commit()

    return _seed


@pytest.fixture
def make_order() -> Callable[..., Order]:
    """Build an Order model directly, bypassing the store."""

    def _make(
        order_id: int = 1,
        *,
        days_pending: float = 5.0,
        phone: str | None = "555-010-2000",
        total_amount: str = "49.99",
        customer_name: str = "Jane Doe",
        order_date: datetime | None = None,
    ) -> Order:
        return Order(
            order_id=order_id,
            order_number=f"ORD-{order_id:05d}",
            order_date=order_date or datetime(2025, 2, 1, 9, 30, 0),
            status=OrderStatus.PENDING,
            total_amount=Decimal(total_amount),
            customer_name=customer_name,
            phone=phone,
            email="jane@example.com",
            days_pending=days_pending,
        )

    return _make


# --- Webhook Fixtures ---


@pytest.fixture
def webhook_transport() -> RecordingTransport:
    """Fake webhook answering 200 ok."""
    return RecordingTransport()


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    def _make(
        status_code: int = 200,
        text: str = "ok",
        exc: type | None = None,
    ) -> RecordingTransport:
        return RecordingTransport(status_code=status_code, text=text, exc=exc)

    return _make
