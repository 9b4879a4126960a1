from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class PublicHoliday:
    """One concrete holiday date. Recurring holidays exist as one row per year."""

    holiday_id: int
    date: date
    name: str
    is_recurring: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.holiday_id,
            "date": self.date.strftime("%Y-%m-%d"),
            "name": self.name,
            "is_recurring": self.is_recurring,
        }


@dataclass(frozen=True)
class HolidayCheck:
    is_holiday: bool
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"is_holiday": self.is_holiday, "holiday_name": self.name}
