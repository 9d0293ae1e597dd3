"""Order lookup and normalization for ticket printing."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from orderboard.core.errors import NotFoundError, ValidationError
from orderboard.models.order import Order
from orderboard.models.site import Site
from orderboard.schemas.report import PrintItemRead, PrintOrderRead
from orderboard.services.order_aggregator import as_utc
from orderboard.services.result_assembler import site_summary

FULFILLMENT_TYPES: set[str] = {"delivery", "pickup"}


def format_money(cents: int | None) -> str:
    """Format integer cents as a ``$12.50`` style string."""
    return f"${int(cents or 0) / 100:.2f}"


def find_order_by_ref(db: Session, order_ref: str) -> Order:
    """Find an order by numeric id or by its external order number."""
    order_ref = (order_ref or "").strip()
    if not order_ref:
        raise ValidationError("`orderId` is required")

    query = select(Order).options(selectinload(Order.items), selectinload(Order.site))
    order: Order | None = None
    if order_ref.isdigit():
        order = db.scalar(query.where(Order.id == int(order_ref)).limit(1))
    if order is None:
        order = db.scalar(query.where(Order.order_number == order_ref).limit(1))
    if order is None:
        raise NotFoundError("Order not found")
    return order


def _display_name(order: Order) -> str:
    return (order.customer_name or order.dropoff_name or "").strip()


def _normalize_fulfillment_type(order: Order) -> str:
    value = (order.fulfillment_type or "").strip().lower()
    if value in FULFILLMENT_TYPES:
        return value
    has_dropoff = bool((order.dropoff_phone or "").strip() or (order.dropoff_name or "").strip())
    return "delivery" if has_dropoff else "pickup"


def _normalize_status(status: str | None) -> str:
    value = (status or "").strip()
    if value.lower() == "confirmed":
        return "paid"
    return value


def normalize_order_for_print(order: Order, site: Site | None = None) -> PrintOrderRead:
    """Return the printer-facing view of ``order``."""
    site = site if site is not None else order.site
    return PrintOrderRead(
        id=order.id,
        order_number=order.order_number,
        created_at=as_utc(order.created_at),
        status=_normalize_status(order.status),
        customer_name=_display_name(order),
        phone=(order.dropoff_phone or "").strip(),
        email=(order.user_email or "").strip(),
        note=(order.notes or "").strip(),
        payment_method=(order.payment_method or "").strip().lower(),
        fulfillment_type=_normalize_fulfillment_type(order),
        total_amount=format_money(order.total_cents),
        tax_amount=format_money(order.tax_cents),
        tip_amount=format_money(order.tip_cents),
        delivery_fee_amount=format_money(order.delivery_fee_cents),
        site=site_summary(site) if site is not None else None,
        items=[
            PrintItemRead(
                name=(item.name or "").strip() or "Item",
                quantity=item.quantity if item.quantity is not None else 1,
                price_cents=item.price_cents,
                size=item.size,
            )
            for item in order.items
        ],
    )
