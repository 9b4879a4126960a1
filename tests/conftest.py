from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.timeclock_payroll.timeclock_payroll.container import assemble_container
from src.timeclock_payroll.timeclock_payroll.core.enums import Role, ShiftStatus
from src.timeclock_payroll.timeclock_payroll.core.exceptions import AlreadyActiveError, ValidationError
from src.timeclock_payroll.timeclock_payroll.rates.model import DefaultPayRates
from src.timeclock_payroll.timeclock_payroll.staff.model import Actor, TeamMember
from src.timeclock_payroll.timeclock_payroll.holidays.model import PublicHoliday
from src.timeclock_payroll.timeclock_payroll.timeclock.model import LongRunningShift, PayrollShiftRow, TimeEntry

ADMIN_ID = 1
SAM_ID = 2
JORDAN_ID = 3
CLIENT_ID = 4
INACTIVE_ID = 5
VENUE_ID = 10


class FakeMembers:
    def __init__(self, members):
        self._by_id = {m.user_id: m for m in members}

    def get_by_id(self, user_id: int) -> Optional[TeamMember]:
        return self._by_id.get(int(user_id))


class FakeVenues:
    def __init__(self, venue_ids):
        self._ids = set(venue_ids)

    def exists(self, venue_id: int) -> bool:
        return int(venue_id) in self._ids


class FakeShiftRepo:
    """In-memory staff_time_entries with the same one-active-shift guard as the unique index."""

    def __init__(self, members: FakeMembers):
        self._members = members
        self._entries: dict[int, TimeEntry] = {}
        self._next_id = 1
        self.stale_saves = 0
        self.payroll_queries = []

    def _new_id(self) -> int:
        entry_id = self._next_id
        self._next_id += 1
        return entry_id

    def _name(self, team_member_id: int) -> str:
        member = self._members.get_by_id(team_member_id)
        return member.full_name if member else ""

    def add(self, entry: TimeEntry) -> TimeEntry:
        entry = replace(entry, entry_id=self._new_id())
        self._entries[entry.entry_id] = entry
        return entry

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        return self._entries.get(int(entry_id))

    def get_active_for_member(self, team_member_id: int) -> Optional[TimeEntry]:
        for e in self._entries.values():
            if e.team_member_id == team_member_id and e.status.is_active:
                return e
        return None

    def create_clock_in(self, *, team_member_id, venue_id, shift_date, clock_in_time, created_by) -> TimeEntry:
        if self.get_active_for_member(team_member_id):
            raise AlreadyActiveError("You already have an active shift. Please clock out first.")
        return self.add(
            TimeEntry(
                entry_id=0,
                team_member_id=team_member_id,
                venue_id=venue_id,
                shift_date=shift_date,
                clock_in_time=clock_in_time,
                status=ShiftStatus.CLOCKED_IN,
                created_by=created_by,
            )
        )

    def save(self, entry: TimeEntry, *, expected_version: int) -> bool:
        if self.stale_saves:
            self.stale_saves -= 1
            return False
        stored = self._entries.get(entry.entry_id)
        if not stored or stored.version != expected_version:
            return False
        self._entries[entry.entry_id] = entry
        return True

    def insert_completed(self, entry: TimeEntry) -> TimeEntry:
        return self.add(replace(entry, status=ShiftStatus.COMPLETED))

    def delete(self, entry_id: int) -> bool:
        return self._entries.pop(int(entry_id), None) is not None

    def list_entries(self, *, team_member_id=None, venue_id=None, start_date=None, end_date=None, limit=None):
        rows = [
            e
            for e in self._entries.values()
            if (team_member_id is None or e.team_member_id == team_member_id)
            and (venue_id is None or e.venue_id == venue_id)
            and (start_date is None or e.shift_date >= start_date)
            and (end_date is None or e.shift_date <= end_date)
        ]
        rows.sort(key=lambda e: (e.shift_date, e.clock_in_time), reverse=True)
        return rows[:limit] if limit else rows

    def list_long_running(self, *, clocked_in_before: datetime, now: datetime):
        rows = [e for e in self._entries.values() if e.status.is_active and e.clock_in_time <= clocked_in_before]
        rows.sort(key=lambda e: e.clock_in_time)
        return [
            LongRunningShift(
                entry_id=e.entry_id,
                team_member_id=e.team_member_id,
                team_member_name=self._name(e.team_member_id),
                venue_id=e.venue_id,
                clock_in_time=e.clock_in_time,
                hours_elapsed=round((now - e.clock_in_time).total_seconds() / 3600, 2),
                status=e.status,
            )
            for e in rows
        ]

    def get_payroll_rows(self, *, start_date: date, end_date: date, team_member_id=None):
        self.payroll_queries.append((start_date, end_date, team_member_id))
        rows = [
            e
            for e in self._entries.values()
            if e.status == ShiftStatus.COMPLETED
            and e.total_paid_hours is not None
            and start_date <= e.shift_date <= end_date
            and (team_member_id is None or e.team_member_id == team_member_id)
        ]
        rows.sort(key=lambda e: (e.shift_date, e.clock_in_time, e.entry_id))
        return [
            PayrollShiftRow(
                entry_id=e.entry_id,
                team_member_id=e.team_member_id,
                team_member_name=self._name(e.team_member_id),
                shift_date=e.shift_date,
                total_hours=e.total_hours or 0.0,
                total_paid_hours=e.total_paid_hours,
            )
            for e in rows
        ]


class FakeRateRepo:
    def __init__(self, default: Optional[DefaultPayRates]):
        self.default = default
        self.overrides = {}
        self.override_reads = 0

    def get_default(self):
        return self.default

    def update_default(self, *, changes: dict, updated_by: int) -> bool:
        if self.default is None:
            return False
        self.default = replace(self.default, updated_by=updated_by, **changes)
        return True

    def get_override(self, team_member_id: int):
        self.override_reads += 1
        return self.overrides.get(int(team_member_id))

    def list_overrides(self):
        return list(self.overrides.values())

    def upsert_override(self, override, *, updated_by: int) -> None:
        self.overrides[override.team_member_id] = override

    def delete_override(self, team_member_id: int) -> bool:
        return self.overrides.pop(int(team_member_id), None) is not None


class FakeHolidayRepo:
    def __init__(self):
        self._by_id: dict[int, PublicHoliday] = {}
        self._next_id = 1
        self.date_reads = 0

    def get_by_date(self, on_date: date):
        self.date_reads += 1
        for h in self._by_id.values():
            if h.date == on_date:
                return h
        return None

    def get_by_id(self, holiday_id: int):
        return self._by_id.get(int(holiday_id))

    def list_between(self, *, start_date=None, end_date=None):
        rows = [
            h
            for h in self._by_id.values()
            if (start_date is None or h.date >= start_date) and (end_date is None or h.date <= end_date)
        ]
        return sorted(rows, key=lambda h: h.date)

    def create(self, *, on_date: date, name: str, is_recurring: bool, created_by: int) -> int:
        if any(h.date == on_date for h in self._by_id.values()):
            raise ValidationError("A holiday already exists on this date")
        holiday_id = self._next_id
        self._next_id += 1
        self._by_id[holiday_id] = PublicHoliday(holiday_id=holiday_id, date=on_date, name=name, is_recurring=is_recurring)
        return holiday_id

    def update(self, *, holiday_id: int, name: str, is_recurring: bool) -> bool:
        if holiday_id not in self._by_id:
            return False
        self._by_id[holiday_id] = replace(self._by_id[holiday_id], name=name, is_recurring=is_recurring)
        return True

    def delete(self, holiday_id: int) -> bool:
        return self._by_id.pop(int(holiday_id), None) is not None


@pytest.fixture
def members():
    return FakeMembers(
        [
            TeamMember(user_id=ADMIN_ID, first_name="Avery", last_name="Admin", roles=frozenset({Role.ADMIN})),
            TeamMember(user_id=SAM_ID, first_name="Sam", last_name="Taylor", roles=frozenset({Role.TEAM_MEMBER})),
            TeamMember(user_id=JORDAN_ID, first_name="Jordan", last_name="Lee", roles=frozenset({Role.TEAM_MEMBER})),
            TeamMember(user_id=CLIENT_ID, first_name="Casey", last_name="Client", roles=frozenset({Role.CLIENT})),
            TeamMember(
                user_id=INACTIVE_ID,
                first_name="Former",
                last_name="Staff",
                roles=frozenset({Role.TEAM_MEMBER}),
                is_active=False,
            ),
        ]
    )


@pytest.fixture
def shifts_repo(members):
    return FakeShiftRepo(members)


@pytest.fixture
def rates_repo():
    return FakeRateRepo(
        DefaultPayRates(
            weekday_rate=25.0,
            saturday_rate=30.0,
            sunday_rate=35.0,
            public_holiday_rate=50.0,
            paid_break_minutes=30,
        )
    )


@pytest.fixture
def holidays_repo():
    return FakeHolidayRepo()


@pytest.fixture
def container(members, shifts_repo, rates_repo, holidays_repo):
    return assemble_container(
        members_repo=members,
        venues_repo=FakeVenues([VENUE_ID]),
        shifts_repo=shifts_repo,
        rates_repo=rates_repo,
        holidays_repo=holidays_repo,
    )


@pytest.fixture
def ledger(container):
    return container.shift_ledger


@pytest.fixture
def admin():
    return Actor(user_id=ADMIN_ID, roles=frozenset({Role.ADMIN}))


@pytest.fixture
def sam():
    return Actor(user_id=SAM_ID, roles=frozenset({Role.TEAM_MEMBER}))


@pytest.fixture
def jordan():
    return Actor(user_id=JORDAN_ID, roles=frozenset({Role.TEAM_MEMBER}))


@pytest.fixture
def client_actor():
    return Actor(user_id=CLIENT_ID, roles=frozenset({Role.CLIENT}))


def completed_shift(
    team_member_id: int,
    shift_date: date,
    paid_hours: float,
    *,
    total_hours: Optional[float] = None,
    start_hour: int = 9,
) -> TimeEntry:
    clock_in = datetime(shift_date.year, shift_date.month, shift_date.day, start_hour, 0)
    return TimeEntry(
        entry_id=0,
        team_member_id=team_member_id,
        venue_id=VENUE_ID,
        shift_date=shift_date,
        clock_in_time=clock_in,
        status=ShiftStatus.COMPLETED,
        clock_out_time=clock_in.replace(hour=min(23, start_hour + int(paid_hours))),
        total_hours=paid_hours if total_hours is None else total_hours,
        total_paid_hours=paid_hours,
    )


@pytest.fixture
def venue_id():
    return VENUE_ID


@pytest.fixture
def add_completed_shift(shifts_repo):
    """Store a completed shift directly (bypassing the ledger) and return it."""

    def _add(team_member_id: int, shift_date: date, paid_hours: float, **kwargs) -> TimeEntry:
        return shifts_repo.add(completed_shift(team_member_id, shift_date, paid_hours, **kwargs))

    return _add
