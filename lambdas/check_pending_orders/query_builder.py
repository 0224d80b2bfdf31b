"""
Query Builder for Long-Pending Order Detection

Describes which orders a monitor run looks at: the staleness threshold,
the statuses that count as awaiting fulfillment, and an optional row cap.

The SQL itself lives in order_monitor.shared.tools.order_store; this
module only resolves the run's parameters from settings and overrides.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from order_monitor.alerts.staleness import validate_threshold
from order_monitor.shared.config import Settings, get_settings
from order_monitor.shared.order_status import AWAITING_FULFILLMENT_STATUSES, OrderStatus

log = structlog.get_logger()


@dataclass(frozen=True)
class PendingOrderQuery:
    """
    Specification for one long-pending order query.

    Orders in one of `statuses` placed more than `threshold_days`
    ago qualify.
    """

    threshold_days: int
    statuses: frozenset[OrderStatus] = field(default=AWAITING_FULFILLMENT_STATUSES)
    limit: int | None = None
    description: str = "Orders awaiting fulfillment past the staleness threshold"

    def __post_init__(self) -> None:
        validate_threshold(self.threshold_days)
        if not self.statuses:
            raise ValueError("PendingOrderQuery needs at least one status")
        if self.limit is not None and self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")

    @property
    def status_values(self) -> list[str]:
        return sorted(s.value for s in self.statuses)


def build_pending_order_query(
    *,
    threshold_days: int | None = None,
    include_statuses: Iterable[OrderStatus | str] | None = None,
    limit: int | None = None,
    settings: Settings | None = None,
) -> PendingOrderQuery:
    """
    Build the query specification for one run.

    Args:
        threshold_days: Override the configured threshold
        include_statuses: Override the awaiting-fulfillment statuses
        limit: Override the configured row cap
        settings: Settings to read defaults from (default: get_settings())

    Returns:
        PendingOrderQuery

    Raises:
        InvalidThresholdError: If the resolved threshold is not a positive integer
        ValueError: If a status name is unknown
    """
    settings = settings or get_settings()

    threshold = (
        threshold_days
        if threshold_days is not None
        else settings.pending_threshold_days
    )

    if include_statuses:
        statuses = frozenset(
            s if isinstance(s, OrderStatus) else OrderStatus.from_string(s)
            for s in include_statuses
        )
    else:
        statuses = AWAITING_FULFILLMENT_STATUSES

    query = PendingOrderQuery(
        threshold_days=threshold,
        statuses=statuses,
        limit=limit if limit is not None else settings.max_orders_per_run,
    )

    log.debug(
        "pending_order_query_built",
        threshold_days=query.threshold_days,
        statuses=query.status_values,
        limit=query.limit,
    )

    return query
