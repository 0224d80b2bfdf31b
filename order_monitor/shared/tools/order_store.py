"""
Order Store Tools

Read-only queries over the orders table.

days_pending is computed by the database against its own clock, so the
result does not depend on the calling process's time. The caller owns
the connection; this module never opens or closes one.
"""

from collections.abc import Iterable

from sqlalchemy import ColumnElement, Float, Select, cast, extract, func, literal_column, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
import structlog

from order_monitor.alerts.staleness import validate_threshold
from order_monitor.shared.exceptions import StoreError
from order_monitor.shared.models.orders import Order
from order_monitor.shared.order_status import AWAITING_FULFILLMENT_STATUSES, OrderStatus
from order_monitor.shared.tools.schema import customers, orders

log = structlog.get_logger()

SECONDS_PER_DAY = 24 * 60 * 60


def days_pending_expression(dialect_name: str) -> ColumnElement[float]:
    """
    Build the dialect-specific fractional days-pending expression.

    Args:
        dialect_name: SQLAlchemy dialect name ("sqlite", "postgresql", "mysql")

    Returns:
        Column expression evaluating to days since orders.order_date

    Raises:
        StoreError: If the dialect has no supported expression
    """
    if dialect_name == "sqlite":
        expr = func.julianday("now") - func.julianday(orders.c.order_date)
    elif dialect_name == "postgresql":
        expr = extract("epoch", func.now() - orders.c.order_date) / SECONDS_PER_DAY
    elif dialect_name in ("mysql", "mariadb"):
        expr = (
            func.timestampdiff(literal_column("SECOND"), orders.c.order_date, func.now())
            / float(SECONDS_PER_DAY)
        )
    else:
        raise StoreError(
            operation="query",
            error_message=f"Unsupported database dialect '{dialect_name}'",
        )
    return cast(expr, Float)


def build_long_pending_query(
    dialect_name: str,
    threshold_days: int,
    *,
    statuses: Iterable[OrderStatus] = AWAITING_FULFILLMENT_STATUSES,
    limit: int | None = None,
) -> Select:
    """
    Build the SELECT for orders pending longer than the threshold.

    The predicate is strict: an order pending for exactly threshold_days
    does not match.

    Args:
        dialect_name: SQLAlchemy dialect name of the target connection
        threshold_days: Positive whole number of days
        statuses: Statuses that count as awaiting fulfillment
        limit: Optional cap on rows returned

    Returns:
        SQLAlchemy Select ordered by order_date, then order_id
    """
    threshold = validate_threshold(threshold_days)
    status_values = sorted(s.value for s in statuses)
    days_pending = days_pending_expression(dialect_name)

    query = (
        select(
            orders.c.order_id,
            orders.c.order_number,
            orders.c.order_date,
            orders.c.status,
            orders.c.total_amount,
            (customers.c.first_name + " " + customers.c.last_name).label("customer_name"),
            customers.c.phone,
            customers.c.email,
            orders.c.shipping_address,
            orders.c.shipping_city,
            orders.c.shipping_state,
            orders.c.shipping_zip,
            days_pending.label("days_pending"),
        )
        .select_from(orders.join(customers, orders.c.customer_id == customers.c.customer_id))
        .where(orders.c.status.in_(status_values))
        .where(days_pending > threshold)
        .order_by(orders.c.order_date.asc(), orders.c.order_id.asc())
    )
    if limit is not None:
        query = query.limit(limit)
    return query


def get_long_pending_orders(
    connection: Connection,
    threshold_days: int,
    *,
    statuses: Iterable[OrderStatus] = AWAITING_FULFILLMENT_STATUSES,
    limit: int | None = None,
) -> list[Order]:
    """
    Load all orders awaiting fulfillment for longer than threshold_days.

    Args:
        connection: Open SQLAlchemy connection (caller manages its lifecycle)
        threshold_days: Positive whole number of days
        statuses: Statuses that count as awaiting fulfillment
        limit: Optional cap on rows returned

    Returns:
        Orders in deterministic order (oldest first)

    Raises:
        InvalidThresholdError: If threshold_days is not a positive integer
        StoreError: If the store is unreachable or the schema is absent
    """
    statuses = frozenset(statuses)
    dialect_name = connection.dialect.name
    query = build_long_pending_query(
        dialect_name,
        threshold_days,
        statuses=statuses,
        limit=limit,
    )

    log.debug(
        "querying_long_pending_orders",
        threshold_days=threshold_days,
        statuses=sorted(s.value for s in statuses),
        dialect=dialect_name,
        limit=limit,
    )

    try:
        rows = connection.execute(query).all()
    except SQLAlchemyError as e:
        log.error(
            "long_pending_query_failed",
            threshold_days=threshold_days,
            error=str(e),
        )
        raise StoreError(operation="query", error_message=str(e)) from e

    pending = [Order.from_row(row) for row in rows]

    log.info(
        "long_pending_orders_loaded",
        threshold_days=threshold_days,
        count=len(pending),
    )

    return pending
