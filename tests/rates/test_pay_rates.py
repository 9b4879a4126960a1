from __future__ import annotations

from datetime import date

import pytest

from src.timeclock_payroll.timeclock_payroll.core.enums import DayCategory
from src.timeclock_payroll.timeclock_payroll.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.timeclock_payroll.timeclock_payroll.rates.model import FALLBACK_PAY_RATES, PayRateOverride
from src.timeclock_payroll.timeclock_payroll.rates.service import RateResolver

ON = date(2025, 1, 6)


@pytest.fixture
def rates(container):
    return container.pay_rate_service


def test_override_fields_fall_back_individually(container, rates_repo, jordan):
    rates_repo.overrides[jordan.user_id] = PayRateOverride(team_member_id=jordan.user_id, weekday_rate=28.0, saturday_rate=None)

    effective = container.rate_resolver.resolve(jordan.user_id, ON)

    assert effective.weekday_rate == 28.0
    assert effective.saturday_rate == 30.0
    assert effective.paid_break_minutes == 30
    assert effective.rate_for(DayCategory.PUBLIC_HOLIDAY) == 50.0


def test_no_override_uses_default(container, sam):
    effective = container.rate_resolver.resolve(sam.user_id, ON)

    assert effective.to_dict() == {
        "weekday_rate": 25.0,
        "saturday_rate": 30.0,
        "sunday_rate": 35.0,
        "public_holiday_rate": 50.0,
        "paid_break_minutes": 30,
    }


def test_missing_default_uses_built_in_rates(rates_repo, sam):
    rates_repo.default = None

    effective = RateResolver(rates_repo).resolve(sam.user_id, ON)

    assert effective == FALLBACK_PAY_RATES.effective()


def test_update_default(rates, admin):
    updated = rates.update_default(actor=admin, changes={"weekday_rate": "27.5", "paid_break_minutes": 0})

    assert updated.weekday_rate == 27.5
    assert updated.paid_break_minutes == 0
    assert updated.saturday_rate == 30.0
    assert updated.updated_by == admin.user_id


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"weekday_rate": 0}, "Pay rates must be positive"),
        ({"sunday_rate": -5}, "Pay rates must be positive"),
        ({"paid_break_minutes": -1}, "Paid break minutes must be positive"),
        ({"paid_break_minutes": 30.5}, "must be a whole number"),
        ({"weekday_rate": "abc"}, "must be a number"),
        ({"weekday_rate": None}, "Weekday rate is required"),
        ({"bonus_rate": 10}, "Unknown pay rate field"),
    ],
)
def test_update_default_validation(rates, admin, changes, message):
    with pytest.raises(ValidationError, match=message):
        rates.update_default(actor=admin, changes=changes)


def test_update_default_requires_admin(rates, sam):
    with pytest.raises(AuthorizationError):
        rates.update_default(actor=sam, changes={"weekday_rate": 30})


def test_upsert_override_creates_then_merges(rates, admin, jordan):
    created = rates.upsert_override(actor=admin, team_member_id=jordan.user_id, changes={"weekday_rate": 28}, notes="Senior")
    updated = rates.upsert_override(actor=admin, team_member_id=jordan.user_id, changes={"sunday_rate": 42})

    assert created.weekday_rate == 28.0
    assert updated.weekday_rate == 28.0
    assert updated.sunday_rate == 42.0
    assert updated.notes == "Senior"
    assert rates.get_override(actor=admin, team_member_id=jordan.user_id) == updated


def test_upsert_override_none_clears_field(rates, admin, jordan, container):
    rates.upsert_override(actor=admin, team_member_id=jordan.user_id, changes={"weekday_rate": 28, "saturday_rate": 33})
    rates.upsert_override(actor=admin, team_member_id=jordan.user_id, changes={"weekday_rate": None})

    effective = container.rate_resolver.resolve(jordan.user_id, ON)

    assert effective.weekday_rate == 25.0
    assert effective.saturday_rate == 33.0


def test_upsert_override_for_unknown_member(rates, admin):
    with pytest.raises(NotFoundError):
        rates.upsert_override(actor=admin, team_member_id=404, changes={"weekday_rate": 28})


def test_upsert_override_for_non_staff_user(rates, admin, client_actor, rates_repo):
    with pytest.raises(NotFoundError, match="Team member not found"):
        rates.upsert_override(actor=admin, team_member_id=client_actor.user_id, changes={"weekday_rate": 28})

    assert rates_repo.overrides == {}


def test_delete_override(rates, admin, jordan):
    rates.upsert_override(actor=admin, team_member_id=jordan.user_id, changes={"weekday_rate": 28})

    rates.delete_override(actor=admin, team_member_id=jordan.user_id)

    assert rates.list_overrides(actor=admin) == []
    with pytest.raises(NotFoundError, match="Custom pay rates not found"):
        rates.delete_override(actor=admin, team_member_id=jordan.user_id)


def test_members_see_only_their_own_effective_rates(rates, sam, jordan, admin):
    assert rates.get_effective(actor=sam, team_member_id=sam.user_id, on_date=ON).weekday_rate == 25.0
    assert rates.get_effective(actor=admin, team_member_id=jordan.user_id, on_date=ON).weekday_rate == 25.0

    with pytest.raises(AuthorizationError):
        rates.get_effective(actor=sam, team_member_id=jordan.user_id, on_date=ON)
