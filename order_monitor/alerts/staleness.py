"""
Staleness Classification

Pure functions deciding whether an order is long pending.

An order qualifies when its fractional days_pending is strictly greater
than the threshold. The displayed value is the truncated whole number
of days, so an order 3.1 days old against a 3-day threshold qualifies
and shows as "3 days pending".
"""

import math
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import structlog

from order_monitor.shared.exceptions import InvalidThresholdError
from order_monitor.shared.models.orders import Order

log = structlog.get_logger()

SECONDS_PER_DAY = 24 * 60 * 60


def validate_threshold(threshold_days: Any) -> int:
    """
    Check that a threshold is a positive whole number of days.

    Raises:
        InvalidThresholdError: For zero, negatives, fractions, bools and non-numbers
    """
    if isinstance(threshold_days, bool) or not isinstance(threshold_days, int):
        raise InvalidThresholdError(threshold_days)
    if threshold_days <= 0:
        raise InvalidThresholdError(threshold_days)
    return threshold_days


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_pending(order_date: datetime, now: datetime | None = None) -> float:
    """
    Fractional days elapsed since order_date.

    Naive datetimes are read as UTC. Orders dated in the future count
    as zero days pending.
    """
    current = _as_utc(now) if now else datetime.now(timezone.utc)
    elapsed = (current - _as_utc(order_date)).total_seconds()
    return max(0.0, elapsed / SECONDS_PER_DAY)


def is_long_pending(pending_days: float, threshold_days: int) -> bool:
    """Strict comparison: exactly threshold_days does not qualify."""
    return pending_days > validate_threshold(threshold_days)


def display_days(pending_days: float) -> int:
    """Whole days for display, truncated toward zero."""
    return math.trunc(pending_days)


def select_long_pending(orders: Iterable[Order], threshold_days: int) -> list[Order]:
    """
    Keep the orders whose days_pending exceeds the threshold.

    Input order is preserved.
    """
    threshold = validate_threshold(threshold_days)
    selected: list[Order] = []
    for order in orders:
        if is_long_pending(order.days_pending, threshold):
            selected.append(order)
        else:
            log.debug(
                "order_below_threshold",
                order_id=order.order_id,
                days_pending=order.days_pending,
                threshold_days=threshold,
            )
    return selected
