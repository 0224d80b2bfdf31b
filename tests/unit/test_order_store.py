"""
Unit tests for the order store tools.

Tests cover:
- Long-pending query against a real SQLite store
- Status filtering, ordering, limit
- Database-computed days_pending
- StoreError on missing schema / unsupported dialect
"""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine

from order_monitor.shared.exceptions import InvalidThresholdError, StoreError
from order_monitor.shared.order_status import OrderStatus
from order_monitor.shared.tools.order_store import (
    build_long_pending_query,
    days_pending_expression,
    get_long_pending_orders,
)


@pytest.fixture
def customer(order_generator):
    return order_generator.generate_customer(first_name="Jane", last_name="Doe", phone=None)


class TestGetLongPendingOrders:
    """Tests for get_long_pending_orders."""

    def test_returns_orders_past_threshold(self, connection, seed_orders, order_generator, customer):
        seed_orders(
            [customer],
            [
                order_generator.generate_order(customer["customer_id"], age_days=2.9),
                order_generator.generate_order(customer["customer_id"], age_days=10.0),
            ],
        )

        result = get_long_pending_orders(connection, 3)

        assert len(result) == 1
        assert result[0].days_pending == pytest.approx(10.0, abs=0.01)

    def test_days_pending_is_fractional(self, connection, seed_orders, order_generator, customer):
        seed_orders(
            [customer],
            [order_generator.generate_order(customer["customer_id"], age_days=3.5)],
        )

        [order] = get_long_pending_orders(connection, 3)

        assert 3.49 < order.days_pending < 3.51

    def test_maps_columns(self, connection, seed_orders, order_generator, customer):
        row = order_generator.generate_order(
            customer["customer_id"],
            age_days=4,
            total_amount=Decimal("49.99"),
        )
        seed_orders([customer], [row])

        [order] = get_long_pending_orders(connection, 3)

        assert order.order_id == row["order_id"]
        assert order.order_number == row["order_number"]
        assert order.customer_name == "Jane Doe"
        assert order.phone is None
        assert order.email == customer["email"]
        assert order.total_amount == Decimal("49.99")
        assert order.status == OrderStatus.PENDING
        assert order.shipping_city == row["shipping_city"]

    def test_excludes_fulfilled_orders(self, connection, seed_orders, order_generator, customer):
        cid = customer["customer_id"]
        seed_orders(
            [customer],
            [
                order_generator.generate_order(cid, age_days=8, status=OrderStatus.PENDING),
                order_generator.generate_order(cid, age_days=8, status=OrderStatus.PROCESSING),
                order_generator.generate_order(cid, age_days=8, status=OrderStatus.SHIPPED),
                order_generator.generate_order(cid, age_days=8, status=OrderStatus.DELIVERED),
                order_generator.generate_order(cid, age_days=8, status=OrderStatus.CANCELLED),
            ],
        )

        result = get_long_pending_orders(connection, 3)

        assert {o.status for o in result} == {OrderStatus.PENDING, OrderStatus.PROCESSING}

    def test_status_override(self, connection, seed_orders, order_generator, customer):
        cid = customer["customer_id"]
        seed_orders(
            [customer],
            [
                order_generator.generate_order(cid, age_days=8, status=OrderStatus.PENDING),
                order_generator.generate_order(cid, age_days=8, status=OrderStatus.PROCESSING),
            ],
        )

        result = get_long_pending_orders(connection, 3, statuses=[OrderStatus.PENDING])

        assert [o.status for o in result] == [OrderStatus.PENDING]

    def test_oldest_first(self, connection, seed_orders, order_generator, customer):
        cid = customer["customer_id"]
        seed_orders(
            [customer],
            [
                order_generator.generate_order(cid, age_days=5, order_id=10),
                order_generator.generate_order(cid, age_days=20, order_id=11),
                order_generator.generate_order(cid, age_days=9, order_id=12),
            ],
        )

        result = get_long_pending_orders(connection, 3)

        assert [o.order_id for o in result] == [11, 12, 10]

    def test_limit(self, connection, seed_orders, order_generator, customer):
        cid = customer["customer_id"]
        seed_orders(
            [customer],
            [order_generator.generate_order(cid, age_days=5 + i) for i in range(4)],
        )

        assert len(get_long_pending_orders(connection, 3, limit=2)) == 2

    def test_no_matches(self, connection, seed_orders, order_generator, customer):
        seed_orders(
            [customer],
            [order_generator.generate_order(customer["customer_id"], age_days=1)],
        )

        assert get_long_pending_orders(connection, 3) == []

    def test_invalid_threshold(self, connection):
        with pytest.raises(InvalidThresholdError):
            get_long_pending_orders(connection, 0)

    def test_missing_schema_raises_store_error(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        with engine.connect() as conn:
            with pytest.raises(StoreError) as exc_info:
                get_long_pending_orders(conn, 3)
        engine.dispose()

        assert exc_info.value.operation == "query"
        assert "no such table" in str(exc_info.value)


class TestQueryConstruction:
    """Tests for build_long_pending_query and days_pending_expression."""

    @pytest.mark.parametrize("dialect", ["sqlite", "postgresql", "mysql"])
    def test_supported_dialects(self, dialect):
        assert days_pending_expression(dialect) is not None

    def test_unsupported_dialect(self):
        with pytest.raises(StoreError, match="Unsupported database dialect"):
            days_pending_expression("oracle")

    def test_sqlite_uses_database_clock(self):
        sql = str(build_long_pending_query("sqlite", 3))
        assert "julianday" in sql

    def test_strict_predicate(self):
        query = build_long_pending_query("sqlite", 3)
        sql = str(query)
        assert "days_pending" in sql
        assert " > " in sql
        assert ">=" not in sql
