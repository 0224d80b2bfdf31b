"""
Order Models

Pydantic models for order rows read from the store and the alert
view derived from them.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from order_monitor.shared.models.notifications import AlertSeverity
from order_monitor.shared.order_status import OrderStatus

# Shown in place of a missing phone number
PHONE_NOT_AVAILABLE: Final[str] = "N/A"


# =====================================================
# Order
# =====================================================


class Order(BaseModel):
    """
    One customer purchase awaiting fulfillment.

    days_pending is computed by the database at read time and is only
    meaningful for the query that produced this instance.
    """

    model_config = ConfigDict(frozen=True)

    order_id: int = Field(..., description="Order primary key")
    order_number: str = Field(..., description="Human-readable order number")
    order_date: datetime = Field(..., description="When the order was placed (UTC)")
    status: OrderStatus = Field(default=OrderStatus.PENDING, description="Fulfillment status")
    total_amount: Decimal = Field(..., ge=0, description="Order total")
    customer_name: str = Field(..., description="Customer display name")
    phone: str | None = Field(default=None, description="Customer phone")
    email: str | None = Field(default=None, description="Customer email")
    shipping_address: str | None = None
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip: str | None = None
    days_pending: float = Field(default=0.0, ge=0, description="Fractional days since order_date")

    @field_validator("days_pending", mode="before")
    @classmethod
    def clamp_days_pending(cls, value: Any) -> Any:
        """Clamp negative values from clock skew to zero."""
        if value is not None and float(value) < 0:
            return 0.0
        return value

    @classmethod
    def from_row(cls, row: Any) -> "Order":
        """Parse from a SQLAlchemy result row."""
        mapping = row._mapping if hasattr(row, "_mapping") else row
        return cls(
            order_id=mapping["order_id"],
            order_number=mapping["order_number"],
            order_date=mapping["order_date"],
            status=OrderStatus.from_string(mapping["status"]),
            total_amount=Decimal(str(mapping["total_amount"])),
            customer_name=mapping["customer_name"],
            phone=mapping.get("phone"),
            email=mapping.get("email"),
            shipping_address=mapping.get("shipping_address"),
            shipping_city=mapping.get("shipping_city"),
            shipping_state=mapping.get("shipping_state"),
            shipping_zip=mapping.get("shipping_zip"),
            days_pending=mapping["days_pending"] or 0.0,
        )


# =====================================================
# Order Alert
# =====================================================


class OrderAlert(BaseModel):
    """
    Presentation view of one long-pending order.

    Created fresh per run and discarded after dispatch.
    """

    model_config = ConfigDict(frozen=True)

    order_id: int
    order_number: str
    customer_name: str
    phone: str = Field(default=PHONE_NOT_AVAILABLE)
    email: str | None = None
    order_date: datetime
    total_amount: Decimal = Field(..., ge=0)
    days_pending: int = Field(..., ge=0, description="Whole days pending, truncated")
    severity: AlertSeverity = Field(default=AlertSeverity.WARNING)
