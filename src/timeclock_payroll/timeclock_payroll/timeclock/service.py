from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.authz import require_admin, require_staff, resolve_subject
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LONG_RUNNING_HOURS
from ..core.enums import ShiftStatus
from ..core.exceptions import (
    AlreadyActiveError,
    AlreadyCompletedError,
    BreakAlreadyOpenError,
    BreakNotStartedError,
    InvalidRangeError,
    InvalidStateError,
    NotFoundError,
    StillOnBreakError,
    ValidationError,
)
from ..payroll.calculator.base import DurationCalculator, ShiftHours
from ..payroll.calculator.standard_calculator import PaidBreakAllowanceCalculator
from ..rates.service import RateResolver
from ..staff.model import Actor
from ..staff.repository import TeamMemberRepository, VenueRepository
from .model import BreakInterval, LongRunningShift, TimeEntry
from .repository import ShiftRepository

logger = logging.getLogger(__name__)

ENTRY_NOT_FOUND = "Time entry not found"
CONCURRENT_CHANGE = "This shift was changed by another request. Please refresh and try again."


def append_admin_note(existing: Optional[str], note: Optional[str]) -> Optional[str]:
    note = (note or "").strip()
    if not note:
        return existing
    admin_note = f"Admin note: {note}"
    if existing:
        return f"{existing}\n\n{admin_note}"
    return admin_note


class ShiftLedger:
    """Use case: the clock-in / break / clock-out state machine.

        (none) -> CLOCKED_IN -> {ON_BREAK <-> CLOCKED_IN}* -> COMPLETED

    Only `admin_clock_out` may go straight from ON_BREAK to COMPLETED.
    Every write is a compare-and-set on the version that was read: of two
    requests that read the same version, only the first write lands and the
    other fails with InvalidStateError.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        resolver: RateResolver,
        members: TeamMemberRepository,
        venues: VenueRepository | None = None,
        *,
        calculator: DurationCalculator | None = None,
        long_running_hours: int = DEFAULT_LONG_RUNNING_HOURS,
    ):
        self._shifts = shifts
        self._resolver = resolver
        self._members = members
        self._venues = venues
        self._calculator = calculator or PaidBreakAllowanceCalculator()
        self._long_running_hours = int(long_running_hours)

    # ----- helpers -------------------------------------------------------

    def _require_member(self, team_member_id: int) -> None:
        member = self._members.get_by_id(int(team_member_id))
        if not member or not member.is_staff:
            raise NotFoundError("Team member not found")
        if not member.is_active:
            raise ValidationError("Team member is not active")

    def _require_venue(self, venue_id) -> int:
        if venue_id in (None, ""):
            raise ValidationError("Venue is required")
        try:
            vid = int(venue_id)
        except (TypeError, ValueError):
            raise ValidationError("Invalid venue")
        if self._venues is not None and not self._venues.exists(vid):
            raise ValidationError("Invalid venue")
        return vid

    def _load(self, entry_id: int) -> TimeEntry:
        entry = self._shifts.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError(ENTRY_NOT_FOUND)
        return entry

    def _load_for_subject(self, entry_id: int, subject_id: int) -> TimeEntry:
        entry = self._shifts.get_by_id(int(entry_id))
        if not entry or entry.team_member_id != subject_id:
            raise NotFoundError(ENTRY_NOT_FOUND)
        return entry

    def _commit(self, read: TimeEntry, updated: TimeEntry) -> TimeEntry:
        updated = replace(updated, version=read.version + 1)
        if not self._shifts.save(updated, expected_version=read.version):
            raise InvalidStateError(CONCURRENT_CHANGE)
        return updated

    def _compute_hours(
        self,
        *,
        team_member_id: int,
        shift_date: date,
        clock_in: datetime,
        clock_out: datetime,
        breaks: Sequence[BreakInterval],
    ) -> ShiftHours:
        rates = self._resolver.resolve(team_member_id, shift_date)
        return self._calculator.compute(
            clock_in=clock_in,
            clock_out=clock_out,
            breaks=breaks,
            paid_break_minutes=rates.paid_break_minutes,
        )

    # ----- self-service / kiosk -----------------------------------------

    def clock_in(
        self,
        *,
        actor: Actor,
        venue_id,
        subject_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> TimeEntry:
        now = now or now_local()
        subject = resolve_subject(actor, subject_id)
        vid = self._require_venue(venue_id)
        self._require_member(subject)

        if self._shifts.get_active_for_member(subject):
            raise AlreadyActiveError("You already have an active shift. Please clock out first.")

        # The store re-checks atomically and raises AlreadyActiveError on a race.
        entry = self._shifts.create_clock_in(
            team_member_id=subject,
            venue_id=vid,
            shift_date=now.date(),
            clock_in_time=now,
            created_by=actor.user_id,
        )
        logger.info("Member %s clocked in at venue %s (entry %s, by %s)", subject, vid, entry.entry_id, actor.user_id)
        return entry

    def start_break(
        self,
        *,
        actor: Actor,
        entry_id: int,
        subject_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> TimeEntry:
        now = now or now_local()
        subject = resolve_subject(actor, subject_id)
        entry = self._load_for_subject(entry_id, subject)

        if entry.status != ShiftStatus.CLOCKED_IN:
            raise InvalidStateError("You must be clocked in to start a break")
        if entry.current_break_start is not None:
            raise BreakAlreadyOpenError("Break already in progress")

        updated = replace(
            entry,
            status=ShiftStatus.ON_BREAK,
            current_break_start=now,
            updated_by=actor.user_id,
        )
        updated = self._commit(entry, updated)
        logger.info("Entry %s: break started", entry.entry_id)
        return updated

    def end_break(
        self,
        *,
        actor: Actor,
        entry_id: int,
        subject_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> TimeEntry:
        now = now or now_local()
        subject = resolve_subject(actor, subject_id)
        entry = self._load_for_subject(entry_id, subject)

        if entry.status != ShiftStatus.ON_BREAK:
            raise InvalidStateError("No break in progress")
        if entry.current_break_start is None:
            raise BreakNotStartedError("Break not started properly")

        updated = replace(
            entry,
            status=ShiftStatus.CLOCKED_IN,
            breaks=entry.breaks + (BreakInterval(start=entry.current_break_start, end=now),),
            current_break_start=None,
            updated_by=actor.user_id,
        )
        updated = self._commit(entry, updated)
        logger.info("Entry %s: break ended", entry.entry_id)
        return updated

    def clock_out(
        self,
        *,
        actor: Actor,
        entry_id: int,
        subject_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> TimeEntry:
        now = now or now_local()
        subject = resolve_subject(actor, subject_id)
        entry = self._load_for_subject(entry_id, subject)

        if entry.status == ShiftStatus.ON_BREAK:
            raise StillOnBreakError("Please end your break before clocking out")
        if entry.status == ShiftStatus.COMPLETED:
            raise AlreadyCompletedError("This shift is already completed")

        hours = self._compute_hours(
            team_member_id=entry.team_member_id,
            shift_date=entry.shift_date,
            clock_in=entry.clock_in_time,
            clock_out=now,
            breaks=entry.breaks,
        )
        updated = replace(
            entry,
            status=ShiftStatus.COMPLETED,
            clock_out_time=now,
            total_hours=hours.total_hours,
            total_paid_hours=hours.total_paid_hours,
            total_break_minutes=hours.total_break_minutes,
            updated_by=actor.user_id,
        )
        updated = self._commit(entry, updated)
        logger.info(
            "Member %s clocked out (entry %s): %.2fh gross, %.2fh paid",
            entry.team_member_id,
            entry.entry_id,
            hours.total_hours,
            hours.total_paid_hours,
        )
        return updated

    def get_active_shift(self, *, actor: Actor, subject_id: Optional[int] = None) -> Optional[TimeEntry]:
        subject = resolve_subject(actor, subject_id)
        return self._shifts.get_active_for_member(subject)

    def list_entries(
        self,
        *,
        actor: Actor,
        team_member_id: Optional[int] = None,
        venue_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        require_staff(actor)
        if not actor.is_admin:
            team_member_id = actor.user_id
        if start and end and end < start:
            raise ValidationError("End date must be after start date")
        return self._shifts.list_entries(
            team_member_id=team_member_id,
            venue_id=venue_id,
            start_date=start,
            end_date=end,
            limit=limit,
        )

    # ----- admin ----------------------------------------------------------

    def admin_clock_out(
        self,
        *,
        actor: Actor,
        entry_id: int,
        clock_out_time: datetime,
        notes: Optional[str] = None,
    ) -> TimeEntry:
        require_admin(actor)
        entry = self._load(entry_id)

        if entry.status == ShiftStatus.COMPLETED:
            raise AlreadyCompletedError("This shift is already completed")
        if clock_out_time <= entry.clock_in_time:
            raise InvalidRangeError("Clock out time must be after clock in time")

        breaks = entry.breaks
        if entry.status == ShiftStatus.ON_BREAK and entry.current_break_start is not None:
            if clock_out_time < entry.current_break_start:
                raise InvalidRangeError("Clock out time must be after the break started")
            breaks = breaks + (BreakInterval(start=entry.current_break_start, end=clock_out_time),)

        hours = self._compute_hours(
            team_member_id=entry.team_member_id,
            shift_date=entry.shift_date,
            clock_in=entry.clock_in_time,
            clock_out=clock_out_time,
            breaks=breaks,
        )
        updated = replace(
            entry,
            status=ShiftStatus.COMPLETED,
            clock_out_time=clock_out_time,
            breaks=breaks,
            current_break_start=None,
            total_hours=hours.total_hours,
            total_paid_hours=hours.total_paid_hours,
            total_break_minutes=hours.total_break_minutes,
            notes=append_admin_note(entry.notes, notes),
            updated_by=actor.user_id,
        )
        updated = self._commit(entry, updated)
        logger.info("Entry %s force-closed by admin %s at %s", entry.entry_id, actor.user_id, clock_out_time)
        return updated

    def update_shift(
        self,
        *,
        actor: Actor,
        entry_id: int,
        clock_in_time: Optional[datetime] = None,
        clock_out_time: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> TimeEntry:
        """Admin correction of boundary times and/or notes.

        Totals are recomputed from the existing breaks whenever a boundary moves.
        """

        require_admin(actor)
        entry = self._load(entry_id)

        if clock_out_time is not None and entry.status.is_active:
            raise InvalidStateError("Use admin clock out to close an active shift")

        new_in = clock_in_time or entry.clock_in_time
        new_out = clock_out_time or entry.clock_out_time
        if new_out is not None and new_out <= new_in:
            raise InvalidRangeError("Clock out time must be after clock in time")

        updated = replace(entry, clock_in_time=new_in, clock_out_time=new_out, updated_by=actor.user_id)
        if notes is not None:
            updated = replace(updated, notes=notes.strip() or None)

        boundary_changed = new_in != entry.clock_in_time or new_out != entry.clock_out_time
        if boundary_changed and new_out is not None:
            hours = self._compute_hours(
                team_member_id=entry.team_member_id,
                shift_date=entry.shift_date,
                clock_in=new_in,
                clock_out=new_out,
                breaks=entry.breaks,
            )
            updated = replace(
                updated,
                total_hours=hours.total_hours,
                total_paid_hours=hours.total_paid_hours,
                total_break_minutes=hours.total_break_minutes,
            )

        updated = self._commit(entry, updated)
        logger.info("Entry %s updated by admin %s", entry.entry_id, actor.user_id)
        return updated

    def delete_shift(self, *, actor: Actor, entry_id: int) -> None:
        require_admin(actor)
        if not self._shifts.delete(int(entry_id)):
            raise NotFoundError(ENTRY_NOT_FOUND)
        logger.info("Entry %s deleted by admin %s", entry_id, actor.user_id)

    def create_manual_shift(
        self,
        *,
        actor: Actor,
        subject_id: int,
        venue_id,
        clock_in_time: datetime,
        clock_out_time: datetime,
        shift_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> TimeEntry:
        require_admin(actor)
        if subject_id is None:
            raise ValidationError("Team member is required")
        vid = self._require_venue(venue_id)
        self._require_member(subject_id)
        if clock_out_time <= clock_in_time:
            raise InvalidRangeError("Clock out time must be after clock in time")

        shift_date = shift_date or clock_in_time.date()
        hours = self._compute_hours(
            team_member_id=int(subject_id),
            shift_date=shift_date,
            clock_in=clock_in_time,
            clock_out=clock_out_time,
            breaks=(),
        )
        entry = self._shifts.insert_completed(
            TimeEntry(
                entry_id=0,
                team_member_id=int(subject_id),
                venue_id=vid,
                shift_date=shift_date,
                clock_in_time=clock_in_time,
                clock_out_time=clock_out_time,
                status=ShiftStatus.COMPLETED,
                total_hours=hours.total_hours,
                total_paid_hours=hours.total_paid_hours,
                total_break_minutes=0,
                notes=(notes or "").strip() or None,
                created_by=actor.user_id,
            )
        )
        logger.info("Manual entry %s created for member %s by admin %s", entry.entry_id, subject_id, actor.user_id)
        return entry

    def list_long_running(
        self,
        *,
        actor: Actor,
        hours_threshold: Optional[float] = None,
        now: datetime | None = None,
    ) -> Sequence[LongRunningShift]:
        require_admin(actor)
        now = now or now_local()
        threshold = self._long_running_hours if hours_threshold is None else float(hours_threshold)
        if threshold <= 0:
            raise ValidationError("Hours threshold must be positive")
        return self._shifts.list_long_running(clocked_in_before=now - timedelta(hours=threshold), now=now)
