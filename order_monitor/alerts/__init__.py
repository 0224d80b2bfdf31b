# Order Alerts
"""
Staleness classification and alert formatting.

Both modules are pure: no I/O, no configuration lookups.
"""

from order_monitor.alerts.formatter import (
    build_alert,
    build_alerts,
    build_payload,
    format_amount,
)
from order_monitor.alerts.staleness import (
    days_pending,
    display_days,
    is_long_pending,
    select_long_pending,
    validate_threshold,
)

__all__ = [
    # Staleness
    "days_pending",
    "display_days",
    "is_long_pending",
    "select_long_pending",
    "validate_threshold",
    # Formatting
    "build_alert",
    "build_alerts",
    "build_payload",
    "format_amount",
]
