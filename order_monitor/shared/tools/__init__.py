# Shared Tools
"""
Tool implementations for the order monitor.

All store access is read-only apart from schema provisioning.
"""

from order_monitor.shared.tools.order_store import (
    build_long_pending_query,
    days_pending_expression,
    get_long_pending_orders,
)
from order_monitor.shared.tools.schema import (
    customers,
    ensure_schema,
    metadata,
    missing_tables,
    orders,
)
from order_monitor.shared.tools.slack import SlackWebhookDispatcher

__all__ = [
    # Order store
    "build_long_pending_query",
    "days_pending_expression",
    "get_long_pending_orders",
    # Schema
    "customers",
    "ensure_schema",
    "metadata",
    "missing_tables",
    "orders",
    # Slack
    "SlackWebhookDispatcher",
]
