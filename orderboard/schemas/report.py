"""Reporting API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SiteSummary(BaseModel):
    """Site header echoed in every report response."""

    id: str
    slug: str
    name: str


class WindowRead(BaseModel):
    """Resolved UTC window, start inclusive and end exclusive."""

    start: datetime
    end: datetime


class DashboardTotals(BaseModel):
    """Whole-window totals; unique counts are window-wide."""

    model_config = ConfigDict(populate_by_name=True)

    orders: int = 0
    revenue: float = 0.0
    customers_unique: int = Field(default=0, alias="customersUnique")
    menu_unique: int = Field(default=0, alias="menuUnique")


class DashboardResponse(BaseModel):
    """Per-day series aligned with ``labels`` plus window totals."""

    ok: bool = True
    site: SiteSummary
    mode: str
    tz: str
    window: WindowRead
    labels: list[str]
    orders: list[int]
    revenue: list[float]
    customers: list[int]
    totals: DashboardTotals


class OrderItemRead(BaseModel):
    """Serialized order line item."""

    name: str | None
    quantity: int | None
    price_cents: int | None = None
    size: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderRead(BaseModel):
    """Serialized order as stored."""

    id: int
    order_number: str | None
    created_at: datetime
    status: str | None
    fulfillment_type: str | None
    user_email: str | None
    customer_name: str | None
    dropoff_name: str | None
    dropoff_phone: str | None
    payment_method: str | None
    notes: str | None
    total_cents: int | None
    tax_cents: int | None
    tip_cents: int | None
    delivery_fee_cents: int | None
    customer: str | None = None
    items: list[OrderItemRead]

    model_config = ConfigDict(from_attributes=True)


class OrderRangeResponse(BaseModel):
    ok: bool = True
    site: SiteSummary
    mode: str
    tz: str
    window: WindowRead
    count: int
    orders: list[OrderRead]


class OrderDayResponse(BaseModel):
    ok: bool = True
    site: SiteSummary
    date: str
    tz: str
    window: WindowRead
    count: int
    orders: list[OrderRead]


class PrintItemRead(BaseModel):
    name: str
    quantity: int
    price_cents: int | None = None
    size: str | None = None


class PrintOrderRead(BaseModel):
    """Order normalized for ticket printers and the print preview UI."""

    id: int
    order_number: str | None
    created_at: datetime
    status: str
    customer_name: str
    phone: str
    email: str
    note: str
    payment_method: str
    fulfillment_type: str
    total_amount: str
    tax_amount: str
    tip_amount: str
    delivery_fee_amount: str
    site: SiteSummary | None
    items: list[PrintItemRead]


class PrintOrderResponse(BaseModel):
    ok: bool = True
    order: PrintOrderRead


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
