"""
Custom Exceptions for the Pending Order Monitor

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.

Delivery outcomes (not configured, rejected) are reported as
DeliveryStatus values, not raised.
"""

from dataclasses import dataclass
from typing import Any


class OrderMonitorError(Exception):
    """Base exception for the pending order monitor."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class StoreError(OrderMonitorError):
    """Order store unreachable or query failed."""

    operation: str  # "query", "connect", "create_schema"
    error_message: str | None = None

    def __init__(
        self,
        operation: str,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.error_message = error_message
        super().__init__(
            f"Order store {operation} failed: {error_message or 'Unknown error'}",
            operation=operation,
            error_message=error_message,
        )


@dataclass
class SchemaProvisioningError(StoreError):
    """Required tables could not be created or verified."""

    tables: list[str] | None = None

    def __init__(
        self,
        tables: list[str] | None = None,
        error_message: str | None = None,
    ) -> None:
        self.tables = tables
        super().__init__(
            operation="create_schema",
            error_message=error_message,
        )
        self.context["tables"] = tables


@dataclass
class InvalidThresholdError(OrderMonitorError):
    """Staleness threshold is not a positive whole number of days."""

    threshold_days: Any

    def __init__(self, threshold_days: Any) -> None:
        self.threshold_days = threshold_days
        super().__init__(
            f"Staleness threshold must be a positive integer number of days, got {threshold_days!r}",
            threshold_days=threshold_days,
        )
