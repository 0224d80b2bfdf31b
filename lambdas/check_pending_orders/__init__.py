"""
CheckPendingOrders Lambda

Periodic Lambda triggered by EventBridge Scheduled Rule to detect
orders left unfulfilled past the staleness threshold and alert a
Slack channel.

Components:
- handler: Lambda entry point and the run_order_monitor pipeline
- query_builder: Threshold and status resolution for each run

Flow:
1. Triggered by scheduled EventBridge rule (e.g., daily)
2. Query the order store for orders pending past the threshold
3. Build one alert per order, batch them into one payload
4. POST the payload to the webhook once
5. Return summary of the run's outcome
"""

from lambdas.check_pending_orders.handler import (
    MonitorOutcome,
    MonitorResult,
    lambda_handler,
    run_order_monitor,
)
from lambdas.check_pending_orders.query_builder import (
    PendingOrderQuery,
    build_pending_order_query,
)

__all__ = [
    "lambda_handler",
    "run_order_monitor",
    "MonitorOutcome",
    "MonitorResult",
    "PendingOrderQuery",
    "build_pending_order_query",
]
