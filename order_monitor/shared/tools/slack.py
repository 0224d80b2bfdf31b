"""
Slack Webhook Tools

Delivers the batched order-alert payload to an incoming webhook.

One run makes at most one POST. The whole batch travels in that single
request, so it is either acknowledged as a unit or not at all. Delivery
outcomes are returned as DeliveryResult values and never raised.
"""

import time

import httpx
import structlog

from order_monitor.shared.config import Settings
from order_monitor.shared.models.notifications import (
    DeliveryResult,
    DeliveryStatus,
    NotificationPayload,
)

log = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 10.0
MAX_ERROR_BODY_CHARS = 500


class SlackWebhookDispatcher:
    """
    Posts notification payloads to a single webhook URL.

    Construct one per run. Without a URL the dispatcher is in the
    not-configured state and send() returns without touching the network.
    """

    def __init__(
        self,
        webhook_url: str | None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url.strip() if webhook_url else None
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> "SlackWebhookDispatcher":
        return cls(
            settings.slack_webhook_url,
            timeout_seconds=settings.webhook_timeout_seconds,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout_seconds,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    def send(self, payload: NotificationPayload) -> DeliveryResult:
        """
        Deliver one payload.

        Args:
            payload: Batched alert message

        Returns:
            DeliveryResult with status NOT_CONFIGURED, DELIVERED or REJECTED
        """
        alert_count = payload.alert_count

        if not self.is_configured:
            log.warning(
                "webhook_not_configured",
                alert_count=alert_count,
            )
            return DeliveryResult(
                status=DeliveryStatus.NOT_CONFIGURED,
                alert_count=alert_count,
                error="No webhook URL configured",
            )

        start_time = time.time()

        log.info(
            "sending_order_alerts",
            alert_count=alert_count,
            channel=payload.channel,
            timeout_seconds=self.timeout_seconds,
        )

        try:
            with self._client() as client:
                response = client.post(self.webhook_url, json=payload.to_webhook_body())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            duration_ms = (time.time() - start_time) * 1000
            log.error(
                "order_alert_transport_failed",
                alert_count=alert_count,
                error_type=type(e).__name__,
                error=str(e),
                duration_ms=duration_ms,
            )
            return DeliveryResult(
                status=DeliveryStatus.REJECTED,
                alert_count=alert_count,
                error=f"{type(e).__name__}: {e}",
                duration_ms=duration_ms,
            )

        duration_ms = (time.time() - start_time) * 1000

        if response.is_success:
            log.info(
                "order_alert_delivered",
                alert_count=alert_count,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            return DeliveryResult(
                status=DeliveryStatus.DELIVERED,
                alert_count=alert_count,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        body = response.text[:MAX_ERROR_BODY_CHARS]
        log.error(
            "order_alert_rejected",
            alert_count=alert_count,
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=body,
            duration_ms=duration_ms,
        )
        return DeliveryResult(
            status=DeliveryStatus.REJECTED,
            alert_count=alert_count,
            status_code=response.status_code,
            error=f"{response.status_code} {response.reason_phrase}: {body}".strip(),
            duration_ms=duration_ms,
        )
