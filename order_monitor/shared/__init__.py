# Shared Infrastructure for the Order Monitor
"""
Shared infrastructure components for the pending order monitor.

This package provides:
- Order status definitions (OrderStatus, awaiting-fulfillment set)
- Pydantic models for orders, alerts and webhook payloads
- Tool implementations for the order store and the Slack webhook
- Configuration management
- Custom exceptions
"""

from order_monitor.shared.config import Settings, get_settings
from order_monitor.shared.exceptions import (
    InvalidThresholdError,
    OrderMonitorError,
    SchemaProvisioningError,
    StoreError,
)
from order_monitor.shared.order_status import (
    AWAITING_FULFILLMENT_STATUSES,
    TERMINAL_STATUSES,
    OrderStatus,
)

__all__ = [
    # Order status
    "OrderStatus",
    "AWAITING_FULFILLMENT_STATUSES",
    "TERMINAL_STATUSES",
    # Exceptions
    "OrderMonitorError",
    "StoreError",
    "SchemaProvisioningError",
    "InvalidThresholdError",
    # Config
    "Settings",
    "get_settings",
]
