from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import LongRunningShift, PayrollShiftRow, TimeEntry


class ShiftRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def get_active_for_member(self, team_member_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        team_member_id: int,
        venue_id: int,
        shift_date: date,
        clock_in_time: datetime,
        created_by: int,
    ) -> TimeEntry:
        """Insert a CLOCKED_IN entry.

        Must raise AlreadyActiveError, atomically, when the member already
        has a CLOCKED_IN/ON_BREAK entry.
        """

        raise NotImplementedError

    def save(self, entry: TimeEntry, *, expected_version: int) -> bool:
        """Compare-and-set: write `entry` (carrying its new version) only if the stored version is still `expected_version`."""

        raise NotImplementedError

    def insert_completed(self, entry: TimeEntry) -> TimeEntry:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError

    def list_entries(
        self,
        *,
        team_member_id: Optional[int] = None,
        venue_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        """Newest first (shift_date DESC, clock_in_time DESC)."""

        raise NotImplementedError

    def list_long_running(self, *, clocked_in_before: datetime, now: datetime) -> Sequence[LongRunningShift]:
        raise NotImplementedError

    def get_payroll_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        team_member_id: Optional[int] = None,
    ) -> Sequence[PayrollShiftRow]:
        """COMPLETED entries with paid hours in [start_date, end_date], ordered by shift_date, clock_in_time, id."""

        raise NotImplementedError
