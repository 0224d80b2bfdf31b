"""
Notification Models

Wire-level shape of the batched webhook message and the outcome of
one delivery attempt.

The payload follows the Slack incoming-webhook attachment format:
https://api.slack.com/reference/messaging/attachments
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AlertSeverity(str, Enum):
    """Attachment color tag."""

    WARNING = "warning"
    DANGER = "danger"


class DeliveryStatus(str, Enum):
    """Terminal states of one dispatch attempt."""

    NOT_CONFIGURED = "not_configured"
    """No webhook URL; nothing was sent."""

    DELIVERED = "delivered"
    """Endpoint answered with a 2xx status."""

    REJECTED = "rejected"
    """Non-2xx status or transport failure."""


# =====================================================
# Payload
# =====================================================


class AttachmentField(BaseModel):
    """One labeled value inside an attachment."""

    model_config = ConfigDict(frozen=True)

    title: str
    value: str
    short: bool = True


class Attachment(BaseModel):
    """One alert block; one per long-pending order."""

    model_config = ConfigDict(frozen=True)

    color: AlertSeverity = AlertSeverity.WARNING
    title: str
    fields: list[AttachmentField] = Field(default_factory=list)
    footer: str | None = None
    ts: int = Field(..., description="Unix seconds the payload was formatted")


class NotificationPayload(BaseModel):
    """
    The single batched message sent per run.

    Always holds at least one attachment; an empty alert set never
    produces a payload.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Message title")
    channel: str = Field(..., description="Target channel identifier")
    username: str = Field(..., description="Sender identity")
    attachments: list[Attachment] = Field(..., min_length=1)

    @property
    def alert_count(self) -> int:
        return len(self.attachments)

    def to_webhook_body(self) -> dict[str, Any]:
        """Convert to the JSON document posted to the webhook."""
        return self.model_dump(mode="json", exclude_none=True)


# =====================================================
# Delivery Result
# =====================================================


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one dispatch attempt."""

    status: DeliveryStatus
    alert_count: int = 0
    status_code: int | None = None
    error: str | None = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        """Whether the endpoint acknowledged the batch."""
        return self.status == DeliveryStatus.DELIVERED

    def to_summary(self) -> dict[str, Any]:
        summary: dict[str, Any] = {
            "status": self.status.value,
            "alert_count": self.alert_count,
        }
        if self.status_code is not None:
            summary["status_code"] = self.status_code
        if self.error:
            summary["error"] = self.error
        return summary
