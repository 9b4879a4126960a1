from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.authz import require_admin
from ..common.datetime_utils import day_of_week
from ..common.validators import require_date_range
from ..core.constants import HOURS_PRECISION
from ..core.enums import DayCategory
from ..holidays.service import HolidayCalendar
from ..rates.model import EffectivePayRates
from ..rates.service import RateResolver
from ..staff.model import Actor
from ..timeclock.repository import ShiftRepository

logger = logging.getLogger(__name__)


@dataclass
class PayrollLineItem:
    team_member_id: int
    team_member_name: str
    total_hours: float = 0.0
    total_paid_hours: float = 0.0
    weekday_hours: float = 0.0
    saturday_hours: float = 0.0
    sunday_hours: float = 0.0
    public_holiday_hours: float = 0.0
    total_pay: float = 0.0
    entries_count: int = 0

    def add_hours(self, category: DayCategory, hours: float) -> None:
        if category == DayCategory.PUBLIC_HOLIDAY:
            self.public_holiday_hours += hours
        elif category == DayCategory.SUNDAY:
            self.sunday_hours += hours
        elif category == DayCategory.SATURDAY:
            self.saturday_hours += hours
        else:
            self.weekday_hours += hours

    def to_dict(self) -> dict:
        return {
            "team_member_id": self.team_member_id,
            "team_member_name": self.team_member_name,
            "total_hours": round(self.total_hours, HOURS_PRECISION),
            "total_paid_hours": round(self.total_paid_hours, HOURS_PRECISION),
            "weekday_hours": round(self.weekday_hours, HOURS_PRECISION),
            "saturday_hours": round(self.saturday_hours, HOURS_PRECISION),
            "sunday_hours": round(self.sunday_hours, HOURS_PRECISION),
            "public_holiday_hours": round(self.public_holiday_hours, HOURS_PRECISION),
            "total_pay": round(self.total_pay, 2),
            "entries_count": self.entries_count,
        }


def classify_day(on_date: date, *, is_public_holiday: bool) -> DayCategory:
    """Holiday beats Sunday beats Saturday beats weekday."""

    if is_public_holiday:
        return DayCategory.PUBLIC_HOLIDAY
    dow = day_of_week(on_date)
    if dow == 0:
        return DayCategory.SUNDAY
    if dow == 6:
        return DayCategory.SATURDAY
    return DayCategory.WEEKDAY


class PayrollAggregator:
    """Per-member payroll for a date range.

    Reads completed shifts only and never writes, so the same inputs always
    produce the same report.
    """

    def __init__(self, shifts: ShiftRepository, resolver: RateResolver, holidays: HolidayCalendar):
        self._shifts = shifts
        self._resolver = resolver
        self._holidays = holidays

    def calculate(
        self,
        *,
        actor: Actor,
        start: Optional[date],
        end: Optional[date],
        team_member_id: Optional[int] = None,
    ) -> list[PayrollLineItem]:
        require_admin(actor)
        start, end = require_date_range(start, end)

        rows = self._shifts.get_payroll_rows(start_date=start, end_date=end, team_member_id=team_member_id)

        rate_cache: dict[tuple[int, date], EffectivePayRates] = {}
        holiday_cache: dict[date, bool] = {}
        items: dict[int, PayrollLineItem] = {}

        for row in rows:
            rate_key = (row.team_member_id, row.shift_date)
            rates = rate_cache.get(rate_key)
            if rates is None:
                rates = self._resolver.resolve(row.team_member_id, row.shift_date)
                rate_cache[rate_key] = rates

            is_holiday = holiday_cache.get(row.shift_date)
            if is_holiday is None:
                is_holiday = self._holidays.is_holiday(row.shift_date).is_holiday
                holiday_cache[row.shift_date] = is_holiday

            category = classify_day(row.shift_date, is_public_holiday=is_holiday)

            item = items.get(row.team_member_id)
            if item is None:
                item = PayrollLineItem(team_member_id=row.team_member_id, team_member_name=row.team_member_name)
                items[row.team_member_id] = item

            item.total_hours += row.total_hours
            item.total_paid_hours += row.total_paid_hours
            item.add_hours(category, row.total_paid_hours)
            item.total_pay += row.total_paid_hours * rates.rate_for(category)
            item.entries_count += 1

        logger.info(
            "Payroll %s..%s: %d shift(s) across %d member(s)",
            start,
            end,
            len(rows),
            len(items),
        )
        return list(items.values())
