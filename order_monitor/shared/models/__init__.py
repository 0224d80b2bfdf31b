# Shared Models
"""
Pydantic models for order rows, alerts and webhook payloads.
"""

from order_monitor.shared.models.notifications import (
    AlertSeverity,
    Attachment,
    AttachmentField,
    DeliveryResult,
    DeliveryStatus,
    NotificationPayload,
)
from order_monitor.shared.models.orders import PHONE_NOT_AVAILABLE, Order, OrderAlert

__all__ = [
    # Orders
    "Order",
    "OrderAlert",
    "PHONE_NOT_AVAILABLE",
    # Notifications
    "AlertSeverity",
    "Attachment",
    "AttachmentField",
    "DeliveryResult",
    "DeliveryStatus",
    "NotificationPayload",
]
