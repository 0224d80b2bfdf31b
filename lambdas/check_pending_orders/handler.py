"""
CheckPendingOrders Lambda Handler

Main entry point for the scheduled pending-order monitor.
Finds orders awaiting fulfillment past the staleness threshold and posts
one batched alert to the configured Slack webhook.

Trigger: EventBridge Scheduled Rule (e.g., cron(0 8 * * ? *) for daily 08:00 UTC)
Output: One Slack incoming-webhook message per run (or none)

Flow:
1. Parse scheduled event (optional threshold / status / dry-run overrides)
2. Provision the order store schema if enabled
3. Query the store for orders pending longer than the threshold
4. Re-check the strict threshold and build one alert per order
5. Batch the alerts into a single payload and POST it once
6. Return a summary with a distinct outcome per run

There is no retry and no outbox. A rejected batch is lost; the next run
only re-alerts orders that are still pending. Undelivered order ids are
logged so operators can follow up by hand.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import structlog
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from lambdas.check_pending_orders.query_builder import (
    PendingOrderQuery,
    build_pending_order_query,
)
from order_monitor.alerts.formatter import build_alerts, build_payload
from order_monitor.alerts.staleness import select_long_pending
from order_monitor.shared.config import Settings, get_settings
from order_monitor.shared.exceptions import InvalidThresholdError, StoreError
from order_monitor.shared.models.notifications import DeliveryResult, DeliveryStatus
from order_monitor.shared.tools.order_store import get_long_pending_orders
from order_monitor.shared.tools.schema import ensure_schema
from order_monitor.shared.tools.slack import SlackWebhookDispatcher

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


class MonitorOutcome(str, Enum):
    """Overall result of one run, kept distinct for operators."""

    NO_ALERTS = "no_alerts"
    DELIVERED = "delivered"
    REJECTED = "rejected"
    NOT_CONFIGURED = "not_configured"
    DRY_RUN = "dry_run"
    STORE_ERROR = "store_error"


_DELIVERY_OUTCOMES = {
    DeliveryStatus.DELIVERED: MonitorOutcome.DELIVERED,
    DeliveryStatus.REJECTED: MonitorOutcome.REJECTED,
    DeliveryStatus.NOT_CONFIGURED: MonitorOutcome.NOT_CONFIGURED,
}


@dataclass
class MonitorResult:
    """Summary of one monitor run."""

    threshold_days: int
    dry_run: bool = False
    store_failed: bool = False
    orders_found: int = 0
    alerts_built: int = 0
    alerted_order_ids: list[int] = field(default_factory=list)
    delivery: DeliveryResult | None = None
    errors: list[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def outcome(self) -> MonitorOutcome:
        if self.store_failed:
            return MonitorOutcome.STORE_ERROR
        if self.alerts_built == 0:
            return MonitorOutcome.NO_ALERTS
        if self.dry_run or self.delivery is None:
            return MonitorOutcome.DRY_RUN
        return _DELIVERY_OUTCOMES[self.delivery.status]

    @property
    def succeeded(self) -> bool:
        """Whether the run completed; delivery failures do not fail a run."""
        return not self.store_failed

    @property
    def alerts_delivered(self) -> int:
        if self.delivery is not None and self.delivery.succeeded:
            return self.delivery.alert_count
        return 0

    @property
    def undelivered_order_ids(self) -> list[int]:
        """Orders alerted on this run that did not reach the webhook."""
        if self.outcome in (MonitorOutcome.REJECTED, MonitorOutcome.NOT_CONFIGURED):
            return list(self.alerted_order_ids)
        return []

    def to_body(self) -> dict[str, Any]:
        """Convert to the handler response body."""
        return {
            "message": "Pending order check complete",
            "outcome": self.outcome.value,
            "threshold_days": self.threshold_days,
            "orders_found": self.orders_found,
            "alerts_built": self.alerts_built,
            "alerts_delivered": self.alerts_delivered,
            "delivery": self.delivery.to_summary() if self.delivery else None,
            "undelivered_order_ids": self.undelivered_order_ids or None,
            "errors": self.errors if self.errors else None,
            "duration_ms": round(self.duration_ms, 2),
        }


def run_order_monitor(
    connection: Connection,
    dispatcher: SlackWebhookDispatcher,
    query: PendingOrderQuery,
    *,
    settings: Settings | None = None,
    dry_run: bool = False,
    now: datetime | None = None,
) -> MonitorResult:
    """
    Run one pass of store -> classifier -> formatter -> dispatcher.

    Only a StoreError ends the run early; it is recorded on the result,
    not raised. Delivery outcomes are logged and summarized.

    Args:
        connection: Open connection to the order store
        dispatcher: Dispatcher built for this run
        query: Threshold and statuses to check
        settings: Presentation settings (default: get_settings())
        dry_run: Build the payload but do not send it
        now: Formatting time for the payload

    Returns:
        MonitorResult
    """
    settings = settings or get_settings()
    start_time = time.time()
    result = MonitorResult(threshold_days=query.threshold_days, dry_run=dry_run)

    log.info(
        "order_monitor_started",
        environment=settings.environment,
        threshold_days=query.threshold_days,
        statuses=query.status_values,
        dry_run=dry_run,
        webhook_configured=dispatcher.is_configured,
    )

    try:
        orders = get_long_pending_orders(
            connection,
            query.threshold_days,
            statuses=query.statuses,
            limit=query.limit,
        )
    except StoreError as e:
        log.error("order_monitor_store_failed", error=str(e))
        result.store_failed = True
        result.errors.append(str(e))
        return _finish(result, start_time)

    result.orders_found = len(orders)
    long_pending = select_long_pending(orders, query.threshold_days)

    log.info(
        "long_pending_orders_found",
        threshold_days=query.threshold_days,
        count=len(long_pending),
    )

    alerts = build_alerts(long_pending, critical_after_days=settings.critical_threshold_days)
    result.alerts_built = len(alerts)
    result.alerted_order_ids = [a.order_id for a in alerts]

    payload = build_payload(
        alerts,
        title=settings.alert_title,
        channel=settings.slack_channel,
        username=settings.slack_username,
        footer=settings.alert_footer,
        now=now,
    )

    if payload is None:
        log.info("no_orders_requiring_follow_up")
        return _finish(result, start_time)

    if dry_run:
        log.info(
            "dry_run_mode",
            alerts_would_send=payload.alert_count,
            order_ids=result.alerted_order_ids,
        )
        return _finish(result, start_time)

    result.delivery = dispatcher.send(payload)

    if not result.delivery.succeeded:
        result.errors.append(
            f"Alerts not delivered ({result.delivery.status.value}): "
            f"{result.delivery.error or 'Unknown error'}"
        )
        log.warning(
            "order_alerts_not_confirmed_delivered",
            status=result.delivery.status.value,
            order_ids=result.alerted_order_ids,
        )

    return _finish(result, start_time)


def _finish(result: MonitorResult, start_time: float) -> MonitorResult:
    result.duration_ms = (time.time() - start_time) * 1000

    log.info(
        "order_monitor_completed",
        outcome=result.outcome.value,
        orders_found=result.orders_found,
        alerts_built=result.alerts_built,
        alerts_delivered=result.alerts_delivered,
        errors=len(result.errors),
        duration_ms=result.duration_ms,
    )

    return result


def _parse_scheduled_event(event: dict[str, Any]) -> dict[str, Any]:
    """
    Parse scheduled EventBridge event for optional configuration.

    The scheduled rule can include custom parameters in the detail:
    - threshold_days: Override the configured staleness threshold
    - statuses: Override the awaiting-fulfillment statuses
    - dry_run: If true, query and format but don't send

    Args:
        event: Lambda event payload

    Returns:
        Configuration dict

    Raises:
        ValueError: If dry_run is neither a boolean nor "true"/"false"
    """
    config: dict[str, Any] = {
        "threshold_days": None,
        "statuses": None,
        "dry_run": False,
    }

    detail = event.get("detail", {})
    if isinstance(detail, str):
        try:
            detail = json.loads(detail)
        except json.JSONDecodeError:
            log.warning("scheduled_event_detail_not_json")
            detail = {}

    if isinstance(detail, dict):
        config["threshold_days"] = detail.get("threshold_days")
        config["statuses"] = detail.get("statuses")
        config["dry_run"] = _parse_flag("dry_run", detail.get("dry_run", False))

    return config


def _parse_flag(name: str, value: Any) -> bool:
    """Accept a JSON boolean or the strings "true"/"false"."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _store_error_result(query: PendingOrderQuery, error: StoreError, dry_run: bool) -> MonitorResult:
    log.error("order_store_unavailable", error=str(error))
    return MonitorResult(
        threshold_days=query.threshold_days,
        dry_run=dry_run,
        store_failed=True,
        errors=[str(error)],
    )


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Main Lambda handler for the scheduled pending-order check.

    Resolves settings once, provisions the schema if enabled, opens a
    connection scoped to this invocation and builds a fresh dispatcher.

    Args:
        event: EventBridge scheduled event
        context: Lambda context

    Returns:
        Processing result summary
    """
    start_time = time.time()
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    try:
        config = _parse_scheduled_event(event or {})
        query = build_pending_order_query(
            threshold_days=config["threshold_days"],
            include_statuses=config["statuses"],
            settings=settings,
        )
    except (InvalidThresholdError, ValueError) as e:
        log.error("invalid_monitor_parameters", error=str(e))
        return {
            "statusCode": 400,
            "body": {
                "message": "Invalid pending order check parameters",
                "errors": [str(e)],
            },
        }

    engine = create_engine(settings.database_url, **settings.engine_config)
    dispatcher = SlackWebhookDispatcher.from_settings(settings)

    try:
        if settings.ensure_schema:
            ensure_schema(engine)
        with engine.connect() as connection:
            result = run_order_monitor(
                connection,
                dispatcher,
                query,
                settings=settings,
                dry_run=config["dry_run"],
            )
    except StoreError as e:
        result = _store_error_result(query, e, config["dry_run"])
    except SQLAlchemyError as e:
        result = _store_error_result(
            query,
            StoreError(operation="connect", error_message=str(e)),
            config["dry_run"],
        )
    finally:
        engine.dispose()

    result.duration_ms = (time.time() - start_time) * 1000

    return {
        "statusCode": 200 if result.succeeded else 500,
        "body": result.to_body(),
    }
