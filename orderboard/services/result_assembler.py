"""Assembly of dashboard responses from day rows and window totals."""

from decimal import ROUND_HALF_UP, Decimal

from orderboard.models.site import Site
from orderboard.schemas.report import DashboardResponse, DashboardTotals, SiteSummary, WindowRead
from orderboard.services.order_aggregator import DayAggregate, WindowTotals
from orderboard.services.window_planner import ReportWindow

CENT: Decimal = Decimal("0.01")


def cents_to_amount(cents: int | None) -> float:
    """Convert integer cents to a currency amount rounded to the cent."""
    amount = (Decimal(int(cents or 0)) / 100).quantize(CENT, rounding=ROUND_HALF_UP)
    return float(amount)


def site_summary(site: Site) -> SiteSummary:
    return SiteSummary(id=site.id, slug=site.slug, name=site.display_name)


def window_read(window: ReportWindow) -> WindowRead:
    return WindowRead(start=window.start_utc, end=window.end_utc)


def assemble_dashboard(
    site: Site,
    window: ReportWindow,
    day_rows: list[DayAggregate],
    totals: WindowTotals,
) -> DashboardResponse:
    """Align day rows onto the window buckets; days without orders become zeros."""
    rows_by_key: dict[str, DayAggregate] = {row.date_key: row for row in day_rows}
    unknown_keys = set(rows_by_key) - set(window.date_keys)
    if unknown_keys:
        raise ValueError(f"Day rows outside the report window: {sorted(unknown_keys)}")

    orders: list[int] = []
    revenue: list[float] = []
    customers: list[int] = []
    for bucket in window.buckets:
        row = rows_by_key.get(bucket.date_key)
        orders.append(row.order_count if row else 0)
        revenue.append(cents_to_amount(row.revenue_cents) if row else 0.0)
        customers.append(row.unique_customer_count if row else 0)

    return DashboardResponse(
        site=site_summary(site),
        mode=window.mode,
        tz=window.timezone,
        window=window_read(window),
        labels=window.labels,
        orders=orders,
        revenue=revenue,
        customers=customers,
        totals=DashboardTotals(
            orders=totals.order_count,
            revenue=cents_to_amount(totals.revenue_cents),
            customers_unique=totals.unique_customer_count,
            menu_unique=totals.unique_menu_item_count,
        ),
    )
