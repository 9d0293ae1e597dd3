"""Order listing and print endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from orderboard.db.session import get_db
from orderboard.models.order import Order
from orderboard.schemas.report import OrderDayResponse, OrderRangeResponse, OrderRead, PrintOrderResponse
from orderboard.services.customer_identity import customer_identity
from orderboard.services.order_aggregator import as_utc
from orderboard.services.order_print import find_order_by_ref, normalize_order_for_print
from orderboard.services.pdf_exports import render_order_ticket_pdf, sanitize_filename
from orderboard.services.report_service import day_orders, range_orders
from orderboard.services.result_assembler import site_summary, window_read

router: APIRouter = APIRouter()


def _serialize_order(order: Order) -> OrderRead:
    payload = OrderRead.model_validate(order)
    payload.created_at = as_utc(order.created_at)
    payload.customer = customer_identity(order)
    return payload


@router.get("/range", response_model=OrderRangeResponse)
def get_orders_by_range(
    site: str | None = Query(default=None),
    mode: str | None = Query(default=None),
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    tz: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> OrderRangeResponse:
    """Return the orders of a week/month/custom window, newest first."""
    site_row, window, orders = range_orders(db, site=site, mode=mode, tz=tz, start=start, end=end)
    return OrderRangeResponse(
        site=site_summary(site_row),
        mode=window.mode,
        tz=window.timezone,
        window=window_read(window),
        count=len(orders),
        orders=[_serialize_order(order) for order in orders],
    )


@router.get("/day", response_model=OrderDayResponse)
def get_orders_by_day(
    site: str | None = Query(default=None),
    date_value: str | None = Query(default=None, alias="date"),
    tz: str | None = Query(default=None),
    extra_days: str | None = Query(default=None, alias="extraDays"),
    db: Session = Depends(get_db),
) -> OrderDayResponse:
    """Return orders of one local day plus the configured lookahead days."""
    site_row, window, orders = day_orders(db, site=site, day=date_value, tz=tz, extra_days=extra_days)
    return OrderDayResponse(
        site=site_summary(site_row),
        date=date_value,
        tz=window.timezone,
        window=window_read(window),
        count=len(orders),
        orders=[_serialize_order(order) for order in orders],
    )


@router.get("/{order_ref}/print", response_model=PrintOrderResponse)
def get_order_for_print(order_ref: str, db: Session = Depends(get_db)) -> PrintOrderResponse:
    order = find_order_by_ref(db, order_ref)
    return PrintOrderResponse(order=normalize_order_for_print(order))


@router.get("/{order_ref}/print.pdf")
def get_order_ticket_pdf(order_ref: str, db: Session = Depends(get_db)) -> Response:
    ticket = normalize_order_for_print(find_order_by_ref(db, order_ref))
    filename = f"order_{sanitize_filename(ticket.order_number or str(ticket.id))}.pdf"
    return Response(
        content=render_order_ticket_pdf(ticket),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
