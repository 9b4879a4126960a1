from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import PublicHoliday


class HolidayRepository(Protocol):
    def get_by_date(self, on_date: date) -> Optional[PublicHoliday]:
        raise NotImplementedError

    def get_by_id(self, holiday_id: int) -> Optional[PublicHoliday]:
        raise NotImplementedError

    def list_between(self, *, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Sequence[PublicHoliday]:
        """Ordered by date ascending."""

        raise NotImplementedError

    def create(self, *, on_date: date, name: str, is_recurring: bool, created_by: int) -> int:
        """Must raise ValidationError when a holiday already exists on that date."""

        raise NotImplementedError

    def update(self, *, holiday_id: int, name: str, is_recurring: bool) -> bool:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
