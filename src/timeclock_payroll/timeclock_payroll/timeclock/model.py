from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class BreakInterval:
    start: datetime
    end: datetime

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one clock-in to clock-out session (a "shift").

    Invariants kept by ShiftLedger:
    - current_break_start is set iff status is ON_BREAK
    - breaks only ever grow at the end
    - version goes up by one on every stored change
    """

    entry_id: int
    team_member_id: int
    venue_id: int
    shift_date: date
    clock_in_time: datetime
    status: ShiftStatus
    clock_out_time: Optional[datetime] = None
    breaks: tuple[BreakInterval, ...] = ()
    current_break_start: Optional[datetime] = None
    total_hours: Optional[float] = None
    total_paid_hours: Optional[float] = None
    total_break_minutes: int = 0
    notes: Optional[str] = None
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    version: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "team_member_id": self.team_member_id,
            "venue_id": self.venue_id,
            "shift_date": self.shift_date.strftime("%Y-%m-%d"),
            "clock_in_time": self.clock_in_time.isoformat(),
            "clock_out_time": self.clock_out_time.isoformat() if self.clock_out_time else None,
            "breaks": [b.to_dict() for b in self.breaks],
            "current_break_start": self.current_break_start.isoformat() if self.current_break_start else None,
            "status": self.status.value,
            "total_hours": self.total_hours,
            "total_paid_hours": self.total_paid_hours,
            "total_break_minutes": self.total_break_minutes,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class LongRunningShift:
    """Read-model for the "forgot to clock out" admin alert."""

    entry_id: int
    team_member_id: int
    team_member_name: str
    venue_id: int
    clock_in_time: datetime
    hours_elapsed: float
    status: ShiftStatus

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "team_member_id": self.team_member_id,
            "team_member_name": self.team_member_name,
            "venue_id": self.venue_id,
            "clock_in_time": self.clock_in_time.isoformat(),
            "hours_elapsed": self.hours_elapsed,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class PayrollShiftRow:
    """Read-model for payroll (completed entries joined with the member's name)."""

    entry_id: int
    team_member_id: int
    team_member_name: str
    shift_date: date
    total_hours: float
    total_paid_hours: float
