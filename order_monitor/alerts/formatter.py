"""
Alert Formatting

Maps long-pending orders to alerts and a batch of alerts to the single
webhook payload sent per run.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

import structlog

from order_monitor.alerts.staleness import display_days
from order_monitor.shared.models.notifications import (
    AlertSeverity,
    Attachment,
    AttachmentField,
    NotificationPayload,
)
from order_monitor.shared.models.orders import PHONE_NOT_AVAILABLE, Order, OrderAlert

log = structlog.get_logger()

CENTS = Decimal("0.01")
ORDER_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_TITLE = ":rotating_light: Pending Orders Requiring Follow-up"
DEFAULT_CHANNEL = "#order-alerts"
DEFAULT_USERNAME = "OrderMonitor"
DEFAULT_FOOTER = "E-commerce Order Monitor"


def format_amount(amount: Decimal) -> str:
    """Render a monetary amount with exactly two decimals, e.g. $49.99."""
    return f"${Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)}"


def format_order_date(order_date: datetime) -> str:
    return order_date.strftime(ORDER_DATE_FORMAT)


def severity_for(pending_days: int, critical_after_days: int | None = None) -> AlertSeverity:
    """Danger once critical_after_days is reached, warning otherwise."""
    if critical_after_days is not None and pending_days >= critical_after_days:
        return AlertSeverity.DANGER
    return AlertSeverity.WARNING


def build_alert(order: Order, *, critical_after_days: int | None = None) -> OrderAlert:
    """
    Build the alert view of one long-pending order.

    A missing or blank phone number is replaced by PHONE_NOT_AVAILABLE,
    and days_pending is truncated to whole days.
    """
    whole_days = display_days(order.days_pending)
    phone = order.phone.strip() if order.phone else ""
    return OrderAlert(
        order_id=order.order_id,
        order_number=order.order_number,
        customer_name=order.customer_name,
        phone=phone or PHONE_NOT_AVAILABLE,
        email=order.email,
        order_date=order.order_date,
        total_amount=order.total_amount,
        days_pending=whole_days,
        severity=severity_for(whole_days, critical_after_days),
    )


def build_alerts(
    orders: Iterable[Order],
    *,
    critical_after_days: int | None = None,
) -> list[OrderAlert]:
    """Build one alert per order, keeping input order."""
    return [build_alert(o, critical_after_days=critical_after_days) for o in orders]


def build_attachment(alert: OrderAlert, *, ts: int, footer: str | None = DEFAULT_FOOTER) -> Attachment:
    """Build the attachment block for one alert."""
    return Attachment(
        color=alert.severity,
        title=f"Order #{alert.order_id} - {alert.days_pending} days pending",
        fields=[
            AttachmentField(title="Customer", value=alert.customer_name),
            AttachmentField(title="Phone", value=alert.phone or PHONE_NOT_AVAILABLE),
            AttachmentField(title="Order Date", value=format_order_date(alert.order_date)),
            AttachmentField(title="Total Amount", value=format_amount(alert.total_amount)),
            AttachmentField(title="Days Pending", value=f"{alert.days_pending} days"),
        ],
        footer=footer,
        ts=ts,
    )


def build_payload(
    alerts: Sequence[OrderAlert],
    *,
    title: str = DEFAULT_TITLE,
    channel: str = DEFAULT_CHANNEL,
    username: str = DEFAULT_USERNAME,
    footer: str | None = DEFAULT_FOOTER,
    now: datetime | None = None,
) -> NotificationPayload | None:
    """
    Batch alerts into the single payload for this run.

    Attachments keep the order of alerts. Every attachment carries the
    same ts: the time the payload was formatted, not the order time.

    Args:
        alerts: Alerts to include
        title: Message text
        channel: Target channel
        username: Sender identity
        footer: Footer for every attachment
        now: Formatting time (defaults to current UTC time)

    Returns:
        NotificationPayload, or None when alerts is empty
    """
    if not alerts:
        log.debug("no_alerts_to_format")
        return None

    formatted_at = now or datetime.now(timezone.utc)
    if formatted_at.tzinfo is None:
        formatted_at = formatted_at.replace(tzinfo=timezone.utc)
    ts = int(formatted_at.timestamp())

    payload = NotificationPayload(
        text=title,
        channel=channel,
        username=username,
        attachments=[build_attachment(a, ts=ts, footer=footer) for a in alerts],
    )

    log.debug(
        "notification_payload_built",
        alert_count=payload.alert_count,
        channel=channel,
    )

    return payload
