"""
Order Status

Fulfillment states an order moves through in the order-management
system. The monitor only reads these; it never transitions an order.
"""

from enum import Enum
from typing import Final


class OrderStatus(str, Enum):
    """
    Order fulfillment status enum.

    Values match the lowercase strings stored in the orders table.
    """

    PENDING = "pending"
    """Order placed, not yet picked up by fulfillment."""

    PROCESSING = "processing"
    """Fulfillment started, not yet handed to a carrier."""

    SHIPPED = "shipped"
    """Handed to a carrier."""

    DELIVERED = "delivered"
    """Received by the customer."""

    CANCELLED = "cancelled"
    """Cancelled before shipment."""

    REFUNDED = "refunded"
    """Payment returned to the customer."""

    @property
    def is_awaiting_fulfillment(self) -> bool:
        """Check if the order still needs someone to act on it."""
        return self in AWAITING_FULFILLMENT_STATUSES

    @classmethod
    def from_string(cls, value: str) -> "OrderStatus":
        """Convert string to OrderStatus enum."""
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as e:
            raise ValueError(
                f"Invalid order status: '{value}'. "
                f"Valid values are: {[s.value for s in cls]}"
            ) from e


# Orders in these states have not shipped, been delivered or been cancelled
AWAITING_FULFILLMENT_STATUSES: Final[frozenset[OrderStatus]] = frozenset({
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
})

TERMINAL_STATUSES: Final[frozenset[OrderStatus]] = frozenset({
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
})
