from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.authz import require_admin, require_staff
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..staff.model import Actor
from .model import HolidayCheck, PublicHoliday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


def _same_day_in_year(source: date, year: int) -> date:
    try:
        return source.replace(year=year)
    except ValueError:
        # Feb 29 in a non-leap target year.
        return source.replace(year=year, day=28)


class HolidayCalendar:
    """Public holidays as an exact-date set.

    Recurrence is expanded into concrete rows when holidays are authored
    (see `roll_forward_recurring`); lookups never infer anything from weekdays.
    """

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def is_holiday(self, on_date: date) -> HolidayCheck:
        holiday = self._holidays.get_by_date(on_date)
        if not holiday:
            return HolidayCheck(is_holiday=False)
        return HolidayCheck(is_holiday=True, name=holiday.name)

    def check(self, *, actor: Actor, on_date: date) -> HolidayCheck:
        require_staff(actor)
        return self.is_holiday(on_date)

    def list_holidays(self, *, actor: Actor, year: Optional[int] = None) -> Sequence[PublicHoliday]:
        require_staff(actor)
        if year is None:
            return self._holidays.list_between()
        return self._holidays.list_between(start_date=date(int(year), 1, 1), end_date=date(int(year), 12, 31))

    def add_holiday(self, *, actor: Actor, on_date: Optional[date], name: str, is_recurring: bool = False) -> PublicHoliday:
        require_admin(actor)
        if on_date is None:
            raise ValidationError("Invalid date format")
        name = require_non_empty(name, "Holiday name")

        holiday_id = self._holidays.create(
            on_date=on_date,
            name=name,
            is_recurring=bool(is_recurring),
            created_by=actor.user_id,
        )
        logger.info("Public holiday %s (%s) added by %s", on_date, name, actor.user_id)
        return PublicHoliday(holiday_id=holiday_id, date=on_date, name=name, is_recurring=bool(is_recurring))

    def update_holiday(
        self,
        *,
        actor: Actor,
        holiday_id: int,
        name: Optional[str] = None,
        is_recurring: Optional[bool] = None,
    ) -> PublicHoliday:
        require_admin(actor)
        holiday = self._holidays.get_by_id(int(holiday_id))
        if not holiday:
            raise NotFoundError("Public holiday not found")

        new_name = holiday.name
        if name is not None:
            if not name.strip():
                raise ValidationError("Holiday name cannot be empty")
            new_name = name.strip()
        new_recurring = holiday.is_recurring if is_recurring is None else bool(is_recurring)

        if not self._holidays.update(holiday_id=holiday.holiday_id, name=new_name, is_recurring=new_recurring):
            raise NotFoundError("Public holiday not found")
        return PublicHoliday(holiday_id=holiday.holiday_id, date=holiday.date, name=new_name, is_recurring=new_recurring)

    def delete_holiday(self, *, actor: Actor, holiday_id: int) -> None:
        require_admin(actor)
        if not self._holidays.delete(int(holiday_id)):
            raise NotFoundError("Public holiday not found")
        logger.info("Public holiday %s deleted by %s", holiday_id, actor.user_id)

    def roll_forward_recurring(self, *, actor: Actor, from_year: int, to_year: int) -> int:
        """Copy `from_year`'s recurring holidays into `to_year`. Returns how many were created."""

        require_admin(actor)
        if from_year is None or to_year is None:
            raise ValidationError("Source and target years are required")
        if int(to_year) <= int(from_year):
            raise ValidationError("Target year must be after the source year")

        source = self._holidays.list_between(start_date=date(int(from_year), 1, 1), end_date=date(int(from_year), 12, 31))
        created = 0
        for holiday in source:
            if not holiday.is_recurring:
                continue
            target = _same_day_in_year(holiday.date, int(to_year))
            if self._holidays.get_by_date(target):
                continue
            self._holidays.create(on_date=target, name=holiday.name, is_recurring=True, created_by=actor.user_id)
            created += 1

        logger.info("Rolled %d recurring holiday(s) from %s to %s", created, from_year, to_year)
        return created
