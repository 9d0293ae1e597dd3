"""Lightweight schema migrations for SQLite databases."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

ORDER_COLUMNS: dict[str, str] = {
    "order_number": "VARCHAR(32)",
    "updated_at": "DATETIME",
    "fulfillment_type": "VARCHAR(16)",
    "customer_name": "VARCHAR(255)",
    "dropoff_name": "VARCHAR(255)",
    "payment_method": "VARCHAR(32)",
    "tax_cents": "INTEGER",
    "tip_cents": "INTEGER",
    "delivery_fee_cents": "INTEGER",
}

ORDER_ITEM_COLUMNS: dict[str, str] = {
    "price_cents": "INTEGER",
    "size": "VARCHAR(64)",
}


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_index_names(connection: Connection, table_name: str) -> set[str]:
    """Return index names for a SQLite table using PRAGMA index_list."""
    rows = connection.execute(text(f"PRAGMA index_list({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _add_missing_columns(connection: Connection, table_name: str, columns: dict[str, str]) -> None:
    existing = _sqlite_column_names(connection, table_name)
    for column_name, column_type in columns.items():
        if column_name not in existing:
            connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_type}"))


def ensure_sqlite_schema(engine: Engine) -> None:
    """Apply lightweight schema updates for legacy SQLite databases."""
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as connection:
        table_rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
        table_names: set[str] = {str(row[0]) for row in table_rows}

        if "orders" in table_names:
            _add_missing_columns(connection, "orders", ORDER_COLUMNS)
            index_names = _sqlite_index_names(connection, "orders")
            if "ix_orders_site_created_at" not in index_names:
                connection.execute(
                    text("CREATE INDEX IF NOT EXISTS ix_orders_site_created_at ON orders(site_id, created_at)")
                )
            if "uq_orders_order_number" not in index_names:
                connection.execute(
                    text("CREATE UNIQUE INDEX IF NOT EXISTS uq_orders_order_number ON orders(order_number)")
                )

        if "order_items" in table_names:
            _add_missing_columns(connection, "order_items", ORDER_ITEM_COLUMNS)

