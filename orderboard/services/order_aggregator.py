"""Order aggregation into local-day rows and whole-window totals."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, selectinload

from orderboard.core.errors import CapabilityError
from orderboard.models.order import Order, OrderItem
from orderboard.services.customer_identity import customer_identity, customer_identity_expr
from orderboard.services.window_planner import ReportWindow

logger = logging.getLogger(__name__)

AWAITING_PAYMENT_STATUS: str = "awaiting_payment"

# SQLSTATEs raised when the zone or timezone()/to_char are unavailable.
TIMEZONE_FAILURE_SQLSTATES: frozenset[str] = frozenset({"22023", "22P02", "42883"})


@dataclass(frozen=True)
class DayAggregate:
    date_key: str
    order_count: int
    revenue_cents: int
    unique_customer_count: int


@dataclass(frozen=True)
class WindowTotals:
    order_count: int = 0
    revenue_cents: int = 0
    unique_customer_count: int = 0
    unique_menu_item_count: int = 0


@dataclass(frozen=True)
class OrderRecord:
    """The fields of one order that aggregation needs."""

    created_at: datetime
    total_cents: int | None
    customer: str | None
    item_names: tuple[str, ...] = ()
    status: str | None = None


@dataclass
class _DayAccumulator:
    order_count: int = 0
    revenue_cents: int = 0
    customers: set[str] = field(default_factory=set)


def is_awaiting_payment(status: str | None) -> bool:
    return (status or "").strip().lower() == AWAITING_PAYMENT_STATUS


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _window_filters(site_id: str, start_utc: datetime, end_utc: datetime) -> list:
    return [
        Order.site_id == site_id,
        Order.created_at >= start_utc,
        Order.created_at < end_utc,
    ]


def _not_awaiting_payment():
    return func.lower(func.trim(func.coalesce(Order.status, ""))) != AWAITING_PAYMENT_STATUS


def aggregate_records(records: Iterable[OrderRecord], window: ReportWindow) -> tuple[list[DayAggregate], WindowTotals]:
    """Group ``records`` by local calendar day and compute window totals.

    Records outside ``[window.start_utc, window.end_utc)`` or awaiting payment
    are ignored. Unique customers and menu items in the totals are counted
    over the whole window, not summed from the day rows.
    """
    zone: ZoneInfo = window.zone
    days: dict[str, _DayAccumulator] = {}
    order_count = 0
    revenue_cents = 0
    all_customers: set[str] = set()
    all_items: set[str] = set()

    for record in records:
        created_at = as_utc(record.created_at)
        if not window.start_utc <= created_at < window.end_utc:
            continue
        if is_awaiting_payment(record.status):
            continue

        cents = int(record.total_cents or 0)
        day_key = created_at.astimezone(zone).date().isoformat()
        day = days.setdefault(day_key, _DayAccumulator())
        day.order_count += 1
        day.revenue_cents += cents
        order_count += 1
        revenue_cents += cents

        if record.customer is not None:
            day.customers.add(record.customer)
            all_customers.add(record.customer)
        all_items.update(name for name in record.item_names if name)

    day_rows = [
        DayAggregate(
            date_key=key,
            order_count=acc.order_count,
            revenue_cents=acc.revenue_cents,
            unique_customer_count=len(acc.customers),
        )
        for key, acc in sorted(days.items())
    ]
    totals = WindowTotals(
        order_count=order_count,
        revenue_cents=revenue_cents,
        unique_customer_count=len(all_customers),
        unique_menu_item_count=len(all_items),
    )
    return day_rows, totals


def _aggregate_in_process(db: Session, site_id: str, window: ReportWindow) -> tuple[list[DayAggregate], WindowTotals]:
    orders = db.scalars(
        select(Order)
        .where(*_window_filters(site_id, window.start_utc, window.end_utc), _not_awaiting_payment())
        .options(selectinload(Order.items))
        .order_by(Order.created_at.asc(), Order.id.asc())
    ).all()
    records = [
        OrderRecord(
            created_at=order.created_at,
            total_cents=order.total_cents,
            customer=customer_identity(order),
            item_names=tuple((item.name or "").strip() for item in order.items),
            status=order.status,
        )
        for order in orders
    ]
    return aggregate_records(records, window)


def _sqlstate(exc: DBAPIError) -> str | None:
    """Return the SQLSTATE of a driver error (psycopg2 ``pgcode``, psycopg ``sqlstate``)."""
    orig = exc.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _aggregate_in_database(db: Session, site_id: str, window: ReportWindow) -> tuple[list[DayAggregate], WindowTotals]:
    filters = [*_window_filters(site_id, window.start_utc, window.end_utc), _not_awaiting_payment()]
    matched = (
        select(
            func.to_char(func.timezone(window.timezone, Order.created_at), "YYYY-MM-DD").label("day_key"),
            Order.id.label("order_id"),
            func.coalesce(Order.total_cents, 0).label("total_cents"),
            customer_identity_expr().label("customer"),
        )
        .where(*filters)
        .subquery()
    )
    revenue = func.coalesce(func.sum(matched.c.total_cents), 0)
    customers = func.count(distinct(matched.c.customer))

    try:
        day_rows = db.execute(
            select(matched.c.day_key, func.count(matched.c.order_id), revenue, customers)
            .group_by(matched.c.day_key)
            .order_by(matched.c.day_key)
        ).all()
        totals_row = db.execute(select(func.count(matched.c.order_id), revenue, customers)).one()
        item_name = func.nullif(func.trim(OrderItem.name), "")
        menu_unique = db.execute(
            select(func.count(distinct(item_name))).join(Order, Order.id == OrderItem.order_id).where(*filters)
        ).scalar_one()
    except DBAPIError as exc:
        if _sqlstate(exc) not in TIMEZONE_FAILURE_SQLSTATES:
            raise
        logger.error("[REPORT] Timezone-aware grouping failed for tz=%s: %s", window.timezone, exc)
        raise CapabilityError(
            "Day grouping requires timezone-aware date functions (timezone()/to_char) "
            f"with the '{window.timezone}' zone available in the database."
        ) from exc

    return (
        [
            DayAggregate(
                date_key=str(row[0]),
                order_count=int(row[1]),
                revenue_cents=int(row[2]),
                unique_customer_count=int(row[3]),
            )
            for row in day_rows
        ],
        WindowTotals(
            order_count=int(totals_row[0]),
            revenue_cents=int(totals_row[1]),
            unique_customer_count=int(totals_row[2]),
            unique_menu_item_count=int(menu_unique),
        ),
    )


# sqlite has no timezone database; its rows are grouped in-process with zoneinfo.
DAY_GROUPING_BACKENDS = {
    "postgresql": _aggregate_in_database,
    "sqlite": _aggregate_in_process,
}


def aggregate_orders(db: Session, site_id: str, window: ReportWindow) -> tuple[list[DayAggregate], WindowTotals]:
    """Aggregate a site's orders in ``window`` into day rows and totals."""
    dialect_name = db.get_bind().dialect.name
    aggregate = DAY_GROUPING_BACKENDS.get(dialect_name)
    if aggregate is None:
        raise CapabilityError(
            f"Order store '{dialect_name}' cannot group orders by local calendar day; "
            "timezone-aware date grouping is required (supported: postgresql, sqlite)."
        )
    return aggregate(db, site_id, window)


def list_window_orders(
    db: Session,
    site_id: str,
    start_utc: datetime,
    end_utc: datetime,
    *,
    exclude_awaiting_payment: bool = True,
) -> list[Order]:
    """Return a site's orders created in ``[start_utc, end_utc)``, newest first."""
    query = select(Order).where(*_window_filters(site_id, start_utc, end_utc))
    if exclude_awaiting_payment:
        query = query.where(_not_awaiting_payment())
    return list(
        db.scalars(query.options(selectinload(Order.items)).order_by(Order.created_at.desc(), Order.id.desc())).all()
    )
