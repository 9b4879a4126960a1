from __future__ import annotations

from datetime import datetime

import pytest

from src.timeclock_payroll.timeclock_payroll.core.enums import KioskAction, ShiftStatus
from src.timeclock_payroll.timeclock_payroll.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.timeclock_payroll.timeclock_payroll.kiosk.badge import render_badge_png


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 1, 6, hour, minute)


@pytest.fixture
def kiosk(container):
    return container.kiosk_service


def test_badge_payload_round_trip(kiosk):
    assert kiosk.badge_payload(2) == "TM:2"
    assert kiosk.parse_badge("  TM:2 ") == 2


@pytest.mark.parametrize("code", [None, "", "2", "TM:", "TM:abc", "TM:0", "XX:2"])
def test_invalid_badges(kiosk, code):
    with pytest.raises(ValidationError, match="Invalid badge code"):
        kiosk.parse_badge(code)


def test_punch_walks_the_shift_lifecycle(kiosk, ledger, admin, sam, venue_id):
    first = kiosk.punch(actor=admin, code="TM:2", venue_id=venue_id, now=at(9))
    assert first.action == KioskAction.CLOCK_IN
    assert first.entry.team_member_id == sam.user_id
    assert first.team_member_name == "Sam Taylor"

    ledger.start_break(actor=sam, entry_id=first.entry.entry_id, now=at(12))
    second = kiosk.punch(actor=admin, code="TM:2", venue_id=venue_id, now=at(12, 30))
    assert second.action == KioskAction.END_BREAK
    assert second.entry.status == ShiftStatus.CLOCKED_IN

    third = kiosk.punch(actor=admin, code="TM:2", venue_id=venue_id, now=at(17))
    assert third.action == KioskAction.CLOCK_OUT
    assert third.entry.total_paid_hours == 8.0
    assert third.to_dict()["action"] == "clock_out"


def test_punch_requires_admin_session(kiosk, sam, venue_id):
    with pytest.raises(AuthorizationError):
        kiosk.punch(actor=sam, code="TM:2", venue_id=venue_id, now=at(9))


def test_punch_unknown_or_inactive_member(kiosk, admin, venue_id):
    with pytest.raises(NotFoundError):
        kiosk.punch(actor=admin, code="TM:404", venue_id=venue_id, now=at(9))
    with pytest.raises(ValidationError, match="not active"):
        kiosk.punch(actor=admin, code="TM:5", venue_id=venue_id, now=at(9))


def test_punch_rejects_badges_of_non_staff_users(kiosk, admin, client_actor, ledger, venue_id):
    with pytest.raises(NotFoundError, match="Team member not found"):
        kiosk.punch(actor=admin, code=f"TM:{client_actor.user_id}", venue_id=venue_id, now=at(9))

    assert ledger.get_active_shift(actor=admin, subject_id=client_actor.user_id) is None


def test_badge_png():
    assert render_badge_png("TM:2").startswith(b"\x89PNG")
