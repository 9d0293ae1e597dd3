"""Schema exports."""

from orderboard.schemas.report import (
    DashboardResponse,
    DashboardTotals,
    ErrorResponse,
    OrderDayResponse,
    OrderItemRead,
    OrderRangeResponse,
    OrderRead,
    PrintItemRead,
    PrintOrderRead,
    PrintOrderResponse,
    SiteSummary,
    WindowRead,
)

__all__ = [
    "DashboardResponse",
    "DashboardTotals",
    "ErrorResponse",
    "OrderDayResponse",
    "OrderItemRead",
    "OrderRangeResponse",
    "OrderRead",
    "PrintItemRead",
    "PrintOrderRead",
    "PrintOrderResponse",
    "SiteSummary",
    "WindowRead",
]
