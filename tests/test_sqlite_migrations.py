"""Tests for lightweight SQLite schema migrations."""

from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from orderboard.db.base import Base
from orderboard.db.migrations import ORDER_COLUMNS, ORDER_ITEM_COLUMNS, ensure_sqlite_schema


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _create_legacy_tables(engine: Engine) -> None:
    with engine.begin() as connection:
        connection.execute(
            text(
                """
                CREATE TABLE sites (
                    id VARCHAR(24) NOT NULL,
                    slug VARCHAR(120) NOT NULL,
                    name VARCHAR(255),
                    created_at DATETIME,
                    PRIMARY KEY (id)
                )
                """
            )
        )
        connection.execute(
            text(
                """
                CREATE TABLE orders (
                    id INTEGER NOT NULL,
                    site_id VARCHAR(24) NOT NULL,
                    created_at DATETIME NOT NULL,
                    status VARCHAR(32),
                    user_email VARCHAR(255),
                    dropoff_phone VARCHAR(64),
                    notes TEXT,
                    total_cents INTEGER,
                    PRIMARY KEY (id),
                    FOREIGN KEY(site_id) REFERENCES sites (id)
                )
                """
            )
        )
        connection.execute(
            text(
                """
                CREATE TABLE order_items (
                    id INTEGER NOT NULL,
                    order_id INTEGER NOT NULL,
                    name VARCHAR(255),
                    quantity INTEGER,
                    PRIMARY KEY (id),
                    FOREIGN KEY(order_id) REFERENCES orders (id)
                )
                """
            )
        )
        connection.execute(text("INSERT INTO sites (id, slug, name) VALUES ('65f0c0ffee0123456789abcd', 'acme', 'Acme')"))
        connection.execute(
            text(
                "INSERT INTO orders (id, site_id, created_at, status, total_cents) "
                "VALUES (1, '65f0c0ffee0123456789abcd', '2024-03-06 19:00:00.000000', 'new', 1000)"
            )
        )


def _column_names(engine: Engine, table_name: str) -> set[str]:
    with engine.begin() as connection:
        rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def test_ensure_sqlite_schema_adds_missing_columns_and_indexes(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "legacy_schema.db")
    _create_legacy_tables(engine)

    ensure_sqlite_schema(engine)

    assert set(ORDER_COLUMNS) <= _column_names(engine, "orders")
    assert set(ORDER_ITEM_COLUMNS) <= _column_names(engine, "order_items")
    with engine.begin() as connection:
        index_rows = connection.execute(text("PRAGMA index_list(orders);")).mappings().all()
        total = connection.execute(text("SELECT total_cents FROM orders WHERE id = 1")).scalar_one()
    index_names = {str(row["name"]) for row in index_rows}
    assert {"ix_orders_site_created_at", "uq_orders_order_number"} <= index_names
    assert total == 1000


def test_ensure_sqlite_schema_is_idempotent_on_current_schema(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "current_schema.db")
    Base.metadata.create_all(bind=engine)
    before = _column_names(engine, "orders")

    ensure_sqlite_schema(engine)
    ensure_sqlite_schema(engine)

    assert _column_names(engine, "orders") == before
