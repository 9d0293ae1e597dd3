"""Reporting window planning in a site's local timezone.

Windows are always planned on local calendar dates and converted to UTC only at
local midnights, so a DST transition inside a window changes the UTC length of
that one day while every bucket still covers exactly one calendar day.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from orderboard.core.errors import ValidationError

REPORT_MODES: tuple[str, ...] = ("week", "month", "custom")
TRAILING_DAYS: dict[str, int] = {"week": 7, "month": 30}
DEFAULT_MAX_CUSTOM_DAYS: int = 62
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

WEEKDAY_LABELS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class BucketKey:
    """One local calendar day of a window."""

    date_key: str
    label: str


@dataclass(frozen=True)
class ReportWindow:
    """Resolved ``[start_utc, end_utc)`` window and its day buckets."""

    mode: str
    timezone: str
    start_utc: datetime
    end_utc: datetime
    buckets: tuple[BucketKey, ...]

    @property
    def date_keys(self) -> list[str]:
        return [bucket.date_key for bucket in self.buckets]

    @property
    def labels(self) -> list[str]:
        return [bucket.label for bucket in self.buckets]

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def load_timezone(name: str | None) -> ZoneInfo:
    """Return the IANA zone for ``name`` or raise ValidationError."""
    if not name or not isinstance(name, str):
        raise ValidationError("`tz` must be an IANA timezone name")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValidationError(f"Unknown timezone: {name}") from exc


def parse_report_date(value: str | None, field_name: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` calendar date."""
    if not value or not DATE_PATTERN.match(value):
        raise ValidationError(f"`{field_name}` must be YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"`{field_name}` is not a valid calendar date") from exc


def local_today(zone: ZoneInfo, now: datetime | None = None) -> date:
    """Return the calendar date in ``zone`` at the instant ``now`` (default: current time)."""
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(zone).date()


def local_midnight_utc(day: date, zone: ZoneInfo) -> datetime:
    """Return the UTC instant at which ``day`` starts in ``zone``."""
    return datetime.combine(day, time(0, 0), tzinfo=zone).astimezone(timezone.utc)


def bucket_label(day: date, mode: str) -> str:
    if mode == "week":
        return WEEKDAY_LABELS[day.weekday()]
    return f"{MONTH_LABELS[day.month - 1]} {day.day:02d}"


def enumerate_buckets(start_utc: datetime, end_utc: datetime, zone: ZoneInfo, mode: str) -> tuple[BucketKey, ...]:
    """List every local calendar day touched by ``[start_utc, end_utc)``."""
    if end_utc <= start_utc:
        return ()
    first_day = start_utc.astimezone(zone).date()
    last_day = (end_utc - timedelta(microseconds=1)).astimezone(zone).date()

    buckets: list[BucketKey] = []
    day = first_day
    while day <= last_day:
        buckets.append(BucketKey(date_key=day.isoformat(), label=bucket_label(day, mode)))
        day += timedelta(days=1)
    return tuple(buckets)


def _custom_local_days(start: str | None, end: str | None, max_custom_days: int) -> tuple[date, date]:
    if not start or not end or not DATE_PATTERN.match(start) or not DATE_PATTERN.match(end):
        raise ValidationError("`start` and `end` (YYYY-MM-DD) are required for custom mode")
    start_day = parse_report_date(start, "start")
    end_day = parse_report_date(end, "end")
    if end_day < start_day:
        raise ValidationError("`end` must not be before `start`")

    # Clamp silently by moving the end forward from the requested start.
    if (end_day - start_day).days + 1 > max_custom_days:
        end_day = start_day + timedelta(days=max_custom_days - 1)
    return start_day, end_day


def plan_window(
    mode: str | None,
    timezone_name: str | None,
    *,
    start: str | None = None,
    end: str | None = None,
    now: datetime | None = None,
    max_custom_days: int = DEFAULT_MAX_CUSTOM_DAYS,
) -> ReportWindow:
    """Plan the reporting window for ``mode`` in ``timezone_name``.

    ``week`` and ``month`` cover the last 7 and 30 local days, today included.
    ``custom`` covers ``start`` through ``end`` inclusive, clamped to
    ``max_custom_days`` days.
    """
    if mode not in REPORT_MODES:
        raise ValidationError("`mode` must be one of: week, month, custom")
    zone = load_timezone(timezone_name)

    if mode == "custom":
        first_day, last_day = _custom_local_days(start, end, max_custom_days)
    else:
        last_day = local_today(zone, now)
        first_day = last_day - timedelta(days=TRAILING_DAYS[mode] - 1)

    start_utc = local_midnight_utc(first_day, zone)
    end_utc = local_midnight_utc(last_day + timedelta(days=1), zone)
    return ReportWindow(
        mode=mode,
        timezone=timezone_name,
        start_utc=start_utc,
        end_utc=end_utc,
        buckets=enumerate_buckets(start_utc, end_utc, zone, mode),
    )


def plan_day_window(day: str | None, timezone_name: str | None, *, lookahead_days: int = 0) -> tuple[ReportWindow, datetime]:
    """Plan a single-day window plus the widened query end.

    The second element is the exclusive UTC end of the query, extended by
    ``lookahead_days`` local days; it never appears in the window itself.
    """
    zone = load_timezone(timezone_name)
    target = parse_report_date(day, "date")

    start_utc = local_midnight_utc(target, zone)
    end_utc = local_midnight_utc(target + timedelta(days=1), zone)
    query_end_utc = local_midnight_utc(target + timedelta(days=1 + max(lookahead_days, 0)), zone)
    window = ReportWindow(
        mode="day",
        timezone=timezone_name,
        start_utc=start_utc,
        end_utc=end_utc,
        buckets=enumerate_buckets(start_utc, end_utc, zone, "day"),
    )
    return window, query_end_utc
