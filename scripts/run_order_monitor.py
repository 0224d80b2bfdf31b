#!/usr/bin/env python3
"""
Run the Pending Order Monitor Locally

Runs one pass of the monitor against a database URL (a local SQLite
file by default) outside of Lambda.

Usage:
    # Check the default ecommerce.db with the configured threshold
    python scripts/run_order_monitor.py

    # Override threshold and only show what would be sent
    python scripts/run_order_monitor.py --threshold-days 5 --dry-run

    # Exit non-zero when the batch was not delivered
    python scripts/run_order_monitor.py --fail-on-undelivered

Exit codes:
    0  run completed (with or without alerts)
    1  order store error or invalid parameters
    2  alerts built but not delivered (only with --fail-on-undelivered)
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
import structlog

from lambdas.check_pending_orders.handler import MonitorOutcome, run_order_monitor
from lambdas.check_pending_orders.query_builder import build_pending_order_query
from order_monitor.shared.config import Settings
from order_monitor.shared.exceptions import InvalidThresholdError, StoreError
from order_monitor.shared.tools.schema import ensure_schema
from order_monitor.shared.tools.slack import SlackWebhookDispatcher

log = structlog.get_logger()

EXIT_OK = 0
EXIT_STORE_ERROR = 1
EXIT_UNDELIVERED = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Alert on orders pending past a threshold")
    parser.add_argument("--database-url", help="SQLAlchemy URL (default: from settings)")
    parser.add_argument("--threshold-days", type=int, help="Staleness threshold in days")
    parser.add_argument(
        "--status",
        action="append",
        dest="statuses",
        help="Status counted as awaiting fulfillment (repeatable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Build alerts but don't send")
    parser.add_argument("--skip-schema", action="store_true", help="Don't create missing tables")
    parser.add_argument(
        "--fail-on-undelivered",
        action="store_true",
        help="Exit 2 when alerts were built but not delivered",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    overrides = {}
    if args.database_url:
        overrides["database_url"] = args.database_url
    settings = Settings(**overrides)

    logging.basicConfig(level=settings.log_level, format="%(message)s", stream=sys.stderr)

    try:
        query = build_pending_order_query(
            threshold_days=args.threshold_days,
            include_statuses=args.statuses,
            settings=settings,
        )
    except (InvalidThresholdError, ValueError) as e:
        print(f"Invalid parameters: {e}", file=sys.stderr)
        return EXIT_STORE_ERROR

    engine = create_engine(settings.database_url, **settings.engine_config)
    dispatcher = SlackWebhookDispatcher.from_settings(settings)

    try:
        if settings.ensure_schema and not args.skip_schema:
            ensure_schema(engine)
        with engine.connect() as connection:
            result = run_order_monitor(
                connection,
                dispatcher,
                query,
                settings=settings,
                dry_run=args.dry_run,
            )
    except (StoreError, SQLAlchemyError) as e:
        log.error("order_store_unavailable", error=str(e))
        print(f"Order store error: {e}", file=sys.stderr)
        return EXIT_STORE_ERROR
    finally:
        engine.dispose()

    print(
        f"Found {result.orders_found} order(s) pending more than {result.threshold_days} days; "
        f"outcome={result.outcome.value}, alerts sent={result.alerts_delivered}, "
        f"not delivered={len(result.undelivered_order_ids)}"
    )

    if result.outcome == MonitorOutcome.STORE_ERROR:
        return EXIT_STORE_ERROR
    if args.fail_on_undelivered and result.undelivered_order_ids:
        return EXIT_UNDELIVERED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
