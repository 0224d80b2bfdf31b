#!/usr/bin/env python3
"""
Generate Sample Test Data

Seeds a local order store with realistic customers and orders so the
monitor can be exercised end to end with run_order_monitor.py.

Usage:
    python scripts/generate_test_data.py
    python scripts/generate_test_data.py --database-url sqlite:///demo.db --orders 50
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import create_engine, delete

from order_monitor.shared.tools.schema import customers, ensure_schema, orders
from tests.utils.order_generator import MockOrderGenerator


def generate_sample_rows(num_customers: int, num_orders: int, seed: int) -> tuple[list[dict], list[dict]]:
    """Generate customers and orders, including one customer without a phone."""
    generator = MockOrderGenerator(seed=seed)

    customer_rows = [generator.generate_customer() for _ in range(max(num_customers - 1, 0))]
    customer_rows.append(generator.generate_customer(phone=None))

    order_rows = generator.generate_random_orders(
        [c["customer_id"] for c in customer_rows],
        num_orders,
    )
    return customer_rows, order_rows


def main():
    """Seed the order store."""
    parser = argparse.ArgumentParser(description="Seed a local order store")
    parser.add_argument("--database-url", default="sqlite:///ecommerce.db")
    parser.add_argument("--customers", type=int, default=10)
    parser.add_argument("--orders", type=int, default=25)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    engine = create_engine(args.database_url)
    ensure_schema(engine)

    customer_rows, order_rows = generate_sample_rows(args.customers, args.orders, args.seed)

    with engine.begin() as connection:
        connection.execute(delete(orders))
        connection.execute(delete(customers))
        connection.execute(customers.insert(), customer_rows)
        connection.execute(orders.insert(), order_rows)

    engine.dispose()

    print(f"Seeded {len(customer_rows)} customers and {len(order_rows)} orders into {args.database_url}")


if __name__ == "__main__":
    main()
