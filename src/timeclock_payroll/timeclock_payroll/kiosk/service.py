from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.authz import require_admin
from ..core.constants import DEFAULT_KIOSK_BADGE_PREFIX
from ..core.enums import KioskAction, ShiftStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..staff.model import Actor
from ..staff.repository import TeamMemberRepository
from ..timeclock.model import TimeEntry
from ..timeclock.service import ShiftLedger

logger = logging.getLogger(__name__)

INVALID_BADGE_MESSAGE = "Invalid badge code"


@dataclass(frozen=True)
class KioskPunch:
    action: KioskAction
    team_member_id: int
    team_member_name: str
    entry: TimeEntry

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "team_member_id": self.team_member_id,
            "team_member_name": self.team_member_name,
            "entry": self.entry.to_dict(),
        }


class KioskService:
    """Shared terminal operated by an admin session.

    Team members scan a badge; the kiosk works out the next step for them:
    no active shift -> clock in, clocked in -> clock out, on break -> end break.
    """

    def __init__(self, ledger: ShiftLedger, members: TeamMemberRepository, *, badge_prefix: str = DEFAULT_KIOSK_BADGE_PREFIX):
        self._ledger = ledger
        self._members = members
        self._prefix = badge_prefix

    def badge_payload(self, team_member_id: int) -> str:
        return f"{self._prefix}{int(team_member_id)}"

    def parse_badge(self, code: Optional[str]) -> int:
        code = (code or "").strip()
        if not code.startswith(self._prefix):
            raise ValidationError(INVALID_BADGE_MESSAGE)
        raw_id = code[len(self._prefix):]
        if not raw_id.isdigit() or int(raw_id) <= 0:
            raise ValidationError(INVALID_BADGE_MESSAGE)
        return int(raw_id)

    def punch(self, *, actor: Actor, code: Optional[str], venue_id, now: datetime | None = None) -> KioskPunch:
        require_admin(actor)
        member_id = self.parse_badge(code)
        member = self._members.get_by_id(member_id)
        if not member or not member.is_staff:
            raise NotFoundError("Team member not found")
        if not member.is_active:
            raise ValidationError("Team member is not active")

        active = self._ledger.get_active_shift(actor=actor, subject_id=member_id)
        if active is None:
            action = KioskAction.CLOCK_IN
            entry = self._ledger.clock_in(actor=actor, venue_id=venue_id, subject_id=member_id, now=now)
        elif active.status == ShiftStatus.ON_BREAK:
            action = KioskAction.END_BREAK
            entry = self._ledger.end_break(actor=actor, entry_id=active.entry_id, subject_id=member_id, now=now)
        else:
            action = KioskAction.CLOCK_OUT
            entry = self._ledger.clock_out(actor=actor, entry_id=active.entry_id, subject_id=member_id, now=now)

        logger.info("Kiosk %s for member %s (entry %s)", action.value, member_id, entry.entry_id)
        return KioskPunch(action=action, team_member_id=member_id, team_member_name=member.full_name, entry=entry)
