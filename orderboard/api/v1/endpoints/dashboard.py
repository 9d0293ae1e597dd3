"""Dashboard series endpoints."""

import csv
from io import StringIO

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from orderboard.db.session import get_db
from orderboard.schemas.report import DashboardResponse
from orderboard.services.pdf_exports import render_dashboard_pdf, sanitize_filename
from orderboard.services.report_service import build_dashboard

router: APIRouter = APIRouter()


def _report_filename(report: DashboardResponse, extension: str) -> str:
    start = report.window.start.date().isoformat()
    return f"orders_{sanitize_filename(report.site.slug)}_{report.mode}_{start}.{extension}"


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    site: str | None = Query(default=None),
    mode: str | None = Query(default=None),
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    tz: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> DashboardResponse:
    """Return per-day orders, revenue and customers plus window totals."""
    return build_dashboard(db, site=site, mode=mode, tz=tz, start=start, end=end)


@router.get("/export.csv")
def export_dashboard_csv(
    site: str | None = Query(default=None),
    mode: str | None = Query(default=None),
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    tz: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> Response:
    report = build_dashboard(db, site=site, mode=mode, tz=tz, start=start, end=end)
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["day", "orders", "revenue", "customers"])
    for label, orders, revenue, customers in zip(report.labels, report.orders, report.revenue, report.customers):
        writer.writerow([label, orders, f"{revenue:.2f}", customers])
    totals = report.totals
    writer.writerow(["total", totals.orders, f"{totals.revenue:.2f}", totals.customers_unique])
    return Response(
        content=output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{_report_filename(report, "csv")}"'},
    )


@router.get("/export.pdf")
def export_dashboard_pdf(
    site: str | None = Query(default=None),
    mode: str | None = Query(default=None),
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    tz: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> Response:
    report = build_dashboard(db, site=site, mode=mode, tz=tz, start=start, end=end)
    return Response(
        content=render_dashboard_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{_report_filename(report, "pdf")}"'},
    )
