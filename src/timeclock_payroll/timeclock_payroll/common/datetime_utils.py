from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def parse_iso_datetime(value: str, field_name: str = "Time") -> datetime:
    """Parse an ISO-8601 timestamp ('2025-01-06T09:00' or with seconds).

    Aware values are converted to naive local time, matching how
    clock times are stored.
    """
    v = (value or "").strip()
    if not v:
        raise ValidationError(f"{field_name} is required")
    try:
        parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date-time")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_of_week(value: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return (value.weekday() + 1) % 7


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600
