from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...core.constants import HOURS_PRECISION
from ...timeclock.model import BreakInterval
from .base import DurationCalculator, ShiftHours


class PaidBreakAllowanceCalculator(DurationCalculator):
    """Standard rule: gross (out - in); breaks beyond the paid allowance are deducted.

    total_hours       = out - in (breaks NOT subtracted)
    unpaid minutes    = max(0, break minutes - allowance)
    total_paid_hours  = max(0, total_hours - unpaid / 60)
    """

    def compute(
        self,
        *,
        clock_in: datetime,
        clock_out: datetime,
        breaks: Sequence[BreakInterval],
        paid_break_minutes: int,
    ) -> ShiftHours:
        break_seconds = sum((b.end - b.start).total_seconds() for b in breaks)
        total_break_minutes = int(break_seconds // 60)

        total_hours = (clock_out - clock_in).total_seconds() / 3600
        unpaid_minutes = max(0, total_break_minutes - int(paid_break_minutes or 0))
        total_paid_hours = max(total_hours - unpaid_minutes / 60, 0.0)

        return ShiftHours(
            total_hours=round(total_hours, HOURS_PRECISION),
            total_paid_hours=round(total_paid_hours, HOURS_PRECISION),
            total_break_minutes=total_break_minutes,
        )


_default_calculator = PaidBreakAllowanceCalculator()


def compute_shift_hours(
    clock_in: datetime,
    clock_out: datetime,
    breaks: Sequence[BreakInterval],
    paid_break_minutes: int,
) -> ShiftHours:
    return _default_calculator.compute(
        clock_in=clock_in,
        clock_out=clock_out,
        breaks=breaks,
        paid_break_minutes=paid_break_minutes,
    )
