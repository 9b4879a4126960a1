from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.constants import MAX_REPORT_RANGE_DAYS
from ..core.exceptions import InvalidRangeError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive_rate(value: Optional[float], field_name: str) -> Optional[float]:
    if value is None:
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if rate <= 0:
        raise ValidationError("Pay rates must be positive")
    return rate


def require_non_negative_minutes(value: Optional[int], field_name: str) -> Optional[int]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if not number.is_integer():
        raise ValidationError(f"{field_name} must be a whole number")
    minutes = int(number)
    if minutes < 0:
        raise ValidationError("Paid break minutes must be positive")
    return minutes


def require_date_range(start: Optional[date], end: Optional[date]) -> tuple[date, date]:
    if start is None or end is None:
        raise ValidationError("Start and end dates are required")
    if end < start:
        raise InvalidRangeError("End date must be after start date")
    if (end - start).days > MAX_REPORT_RANGE_DAYS:
        raise InvalidRangeError("Date range cannot exceed 1 year")
    return start, end
