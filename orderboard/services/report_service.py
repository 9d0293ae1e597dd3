"""Report pipeline: resolve site, plan window, aggregate, assemble."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from orderboard.core.config import settings
from orderboard.core.errors import ValidationError
from orderboard.models.order import Order
from orderboard.models.site import Site
from orderboard.schemas.report import DashboardResponse
from orderboard.services.order_aggregator import aggregate_orders, list_window_orders
from orderboard.services.result_assembler import assemble_dashboard
from orderboard.services.site_resolver import resolve_site
from orderboard.services.window_planner import REPORT_MODES, ReportWindow, load_timezone, plan_day_window, plan_window

logger = logging.getLogger(__name__)


def validate_report_params(site: str | None, mode: str | None) -> None:
    """Reject missing ``site`` or unknown ``mode`` before touching the store."""
    if not site or not site.strip():
        raise ValidationError("`site` is required (slug or id)")
    if mode not in REPORT_MODES:
        raise ValidationError("`mode` must be one of: week, month, custom")


def resolve_timezone_name(tz: str | None) -> str:
    name = tz if tz else settings.report_timezone
    load_timezone(name)
    return name


def parse_lookahead_days(value: str | None) -> int:
    """Parse ``extraDays``: unparsable values use the default, others are clamped."""
    try:
        days = int(str(value).strip())
    except (TypeError, ValueError):
        return settings.day_lookahead_days
    return min(max(days, 0), settings.day_lookahead_max_days)


def plan_report(
    db: Session,
    *,
    site: str | None,
    mode: str | None,
    tz: str | None = None,
    start: str | None = None,
    end: str | None = None,
    now: datetime | None = None,
) -> tuple[Site, ReportWindow]:
    """Validate parameters, plan the window and resolve the site."""
    validate_report_params(site, mode)
    timezone_name = resolve_timezone_name(tz)
    window = plan_window(
        mode,
        timezone_name,
        start=start,
        end=end,
        now=now,
        max_custom_days=settings.max_custom_days,
    )
    site_row = resolve_site(db, site)
    return site_row, window


def build_dashboard(
    db: Session,
    *,
    site: str | None,
    mode: str | None,
    tz: str | None = None,
    start: str | None = None,
    end: str | None = None,
    now: datetime | None = None,
) -> DashboardResponse:
    """Build the per-day dashboard series and window totals for a site."""
    site_row, window = plan_report(db, site=site, mode=mode, tz=tz, start=start, end=end, now=now)
    day_rows, totals = aggregate_orders(db, site_row.id, window)
    logger.info(
        "[REPORT] dashboard site=%s mode=%s tz=%s days=%s orders=%s",
        site_row.slug,
        window.mode,
        window.timezone,
        len(window.buckets),
        totals.order_count,
    )
    return assemble_dashboard(site_row, window, day_rows, totals)


def range_orders(
    db: Session,
    *,
    site: str | None,
    mode: str | None,
    tz: str | None = None,
    start: str | None = None,
    end: str | None = None,
    now: datetime | None = None,
) -> tuple[Site, ReportWindow, list[Order]]:
    """Return the raw orders of a planned window, awaiting payment excluded."""
    site_row, window = plan_report(db, site=site, mode=mode, tz=tz, start=start, end=end, now=now)
    orders = list_window_orders(db, site_row.id, window.start_utc, window.end_utc)
    return site_row, window, orders


def day_orders(
    db: Session,
    *,
    site: str | None,
    day: str | None,
    tz: str | None = None,
    extra_days: str | None = None,
) -> tuple[Site, ReportWindow, list[Order]]:
    """Return orders from the local ``day`` onwards, widened by the lookahead.

    Every status is listed; the returned window covers only ``day``.
    """
    if not site or not site.strip():
        raise ValidationError("`site` is required (slug or id)")
    timezone_name = resolve_timezone_name(tz)
    window, query_end_utc = plan_day_window(day, timezone_name, lookahead_days=parse_lookahead_days(extra_days))
    site_row = resolve_site(db, site)
    orders = list_window_orders(
        db,
        site_row.id,
        window.start_utc,
        query_end_utc,
        exclude_awaiting_payment=False,
    )
    return site_row, window, orders
