from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

SECONDS_PER_HOUR = 3600


def now_utc() -> datetime:
    """Current time as an aware UTC datetime.

    Note: Wrapped so services can take it as an injectable clock.
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, e.g. 2024-06-01T08:00:00Z."""
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


def year_bounds(year: int) -> tuple[datetime, datetime]:
    """[Jan 1 of year, Jan 1 of year+1) as UTC instants."""
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    return start, end


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def round_hours(hours: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return float(Decimal(str(hours)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")
