"""
Order Store Schema

SQLAlchemy Core table definitions for the customers and orders tables,
and the provisioning step that creates them when missing.

Provisioning is a precondition run by the entry point before the
monitor queries; the query path never repairs a missing schema.
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    inspect,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
import structlog

from order_monitor.shared.exceptions import SchemaProvisioningError
from order_monitor.shared.order_status import OrderStatus

log = structlog.get_logger()

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("customer_id", Integer, primary_key=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255)),
    Column("phone", String(50)),
)

orders = Table(
    "orders",
    metadata,
    Column("order_id", Integer, primary_key=True),
    Column("order_number", String(50), nullable=False, unique=True),
    Column("customer_id", Integer, ForeignKey("customers.customer_id"), nullable=False),
    Column("order_date", DateTime, nullable=False),
    Column("status", String(20), nullable=False, default=OrderStatus.PENDING.value),
    Column("total_amount", Numeric(10, 2), nullable=False),
    Column("shipping_address", String(255)),
    Column("shipping_city", String(100)),
    Column("shipping_state", String(50)),
    Column("shipping_zip", String(20)),
    Index("ix_orders_status_order_date", "status", "order_date"),
)

REQUIRED_TABLES: tuple[str, ...] = (customers.name, orders.name)


def missing_tables(bind: Engine | Connection) -> list[str]:
    """Return the required tables that do not exist yet."""
    existing = set(inspect(bind).get_table_names())
    return [name for name in REQUIRED_TABLES if name not in existing]


def ensure_schema(bind: Engine | Connection) -> list[str]:
    """
    Create the customers and orders tables if they are missing.

    Idempotent: existing tables are left untouched.

    Args:
        bind: Engine or open connection to the order store

    Returns:
        Names of the tables that were created

    Raises:
        SchemaProvisioningError: If the tables cannot be inspected or created
    """
    try:
        to_create = missing_tables(bind)
        if to_create:
            metadata.create_all(bind, checkfirst=True)
            if isinstance(bind, Connection):
                bind.commit()
    except SQLAlchemyError as e:
        log.error("schema_provisioning_failed", error=str(e))
        raise SchemaProvisioningError(
            tables=list(REQUIRED_TABLES),
            error_message=str(e),
        ) from e

    if to_create:
        log.info("schema_tables_created", tables=to_create)
    else:
        log.debug("schema_already_present", tables=list(REQUIRED_TABLES))

    return to_create
