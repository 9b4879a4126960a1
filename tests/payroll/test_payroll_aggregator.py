from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timeclock_payroll.timeclock_payroll.core.exceptions import AuthorizationError, InvalidRangeError
from src.timeclock_payroll.timeclock_payroll.payroll.export import write_payroll_csv
from src.timeclock_payroll.timeclock_payroll.payroll.service import classify_day
from src.timeclock_payroll.timeclock_payroll.core.enums import DayCategory
from src.timeclock_payroll.timeclock_payroll.rates.model import PayRateOverride

MONDAY = date(2025, 1, 6)
TUESDAY = date(2025, 1, 7)
SATURDAY = date(2025, 1, 11)
SUNDAY = date(2025, 1, 12)
RANGE = dict(start=date(2025, 1, 6), end=date(2025, 1, 19))


@pytest.fixture
def aggregator(container):
    return container.payroll_aggregator


def test_totals_by_day_category(aggregator, admin, sam, add_completed_shift):
    add_completed_shift(sam.user_id, MONDAY, 8.0)
    add_completed_shift(sam.user_id, SATURDAY, 5.0)

    [item] = aggregator.calculate(actor=admin, **RANGE)

    assert item.team_member_name == "Sam Taylor"
    assert item.weekday_hours == 8.0
    assert item.saturday_hours == 5.0
    assert item.total_paid_hours == 13.0
    assert item.total_pay == 350.0
    assert item.entries_count == 2


def test_holiday_beats_saturday(aggregator, admin, sam, add_completed_shift, container):
    container.holiday_calendar.add_holiday(actor=admin, on_date=SATURDAY, name="Founders Day")
    add_completed_shift(sam.user_id, MONDAY, 8.0)
    add_completed_shift(sam.user_id, SATURDAY, 5.0)

    [item] = aggregator.calculate(actor=admin, **RANGE)

    assert item.saturday_hours == 0.0
    assert item.public_holiday_hours == 5.0
    assert item.total_pay == 8 * 25 + 5 * 50


def test_sunday_rate(aggregator, admin, sam, add_completed_shift):
    add_completed_shift(sam.user_id, SUNDAY, 4.0)

    [item] = aggregator.calculate(actor=admin, **RANGE)

    assert item.sunday_hours == 4.0
    assert item.total_pay == 140.0


def test_classify_day_priority():
    assert classify_day(SATURDAY, is_public_holiday=True) == DayCategory.PUBLIC_HOLIDAY
    assert classify_day(SUNDAY, is_public_holiday=False) == DayCategory.SUNDAY
    assert classify_day(SATURDAY, is_public_holiday=False) == DayCategory.SATURDAY
    assert classify_day(MONDAY, is_public_holiday=False) == DayCategory.WEEKDAY


def test_override_rates_apply_per_member(aggregator, admin, sam, jordan, add_completed_shift, rates_repo):
    rates_repo.overrides[jordan.user_id] = PayRateOverride(team_member_id=jordan.user_id, weekday_rate=28.0)
    add_completed_shift(sam.user_id, MONDAY, 8.0)
    add_completed_shift(jordan.user_id, MONDAY, 8.0)
    add_completed_shift(jordan.user_id, SATURDAY, 5.0)

    items = {i.team_member_id: i for i in aggregator.calculate(actor=admin, **RANGE)}

    assert items[sam.user_id].total_pay == 200.0
    assert items[jordan.user_id].total_pay == 8 * 28 + 5 * 30


def test_paid_hours_drive_pay_not_gross_hours(aggregator, admin, sam, add_completed_shift):
    add_completed_shift(sam.user_id, MONDAY, 7.5, total_hours=8.0)

    [item] = aggregator.calculate(actor=admin, **RANGE)

    assert item.total_hours == 8.0
    assert item.total_paid_hours == 7.5
    assert item.total_pay == 187.5


def test_line_items_in_first_seen_order(aggregator, admin, sam, jordan, add_completed_shift):
    add_completed_shift(sam.user_id, TUESDAY, 8.0)
    add_completed_shift(jordan.user_id, MONDAY, 8.0)
    add_completed_shift(sam.user_id, MONDAY, 4.0, start_hour=14)

    items = aggregator.calculate(actor=admin, **RANGE)

    assert [i.team_member_id for i in items] == [jordan.user_id, sam.user_id]


def test_filter_by_member_and_range(aggregator, admin, sam, jordan, add_completed_shift, shifts_repo):
    add_completed_shift(sam.user_id, MONDAY, 8.0)
    add_completed_shift(jordan.user_id, MONDAY, 8.0)
    add_completed_shift(sam.user_id, date(2025, 2, 3), 8.0)

    items = aggregator.calculate(actor=admin, team_member_id=sam.user_id, **RANGE)

    assert [(i.team_member_id, i.entries_count) for i in items] == [(sam.user_id, 1)]
    assert shifts_repo.payroll_queries[-1] == (RANGE["start"], RANGE["end"], sam.user_id)


def test_active_shifts_are_not_paid(aggregator, admin, sam, ledger, venue_id):
    ledger.clock_in(actor=sam, venue_id=venue_id, now=datetime(2025, 1, 6, 9, 0))

    assert aggregator.calculate(actor=admin, **RANGE) == []


def test_rate_and_holiday_lookups_are_cached_per_call(
    aggregator, admin, sam, add_completed_shift, rates_repo, holidays_repo
):
    add_completed_shift(sam.user_id, MONDAY, 4.0, start_hour=8)
    add_completed_shift(sam.user_id, MONDAY, 4.0, start_hour=14)
    add_completed_shift(sam.user_id, TUESDAY, 8.0)

    aggregator.calculate(actor=admin, **RANGE)

    assert rates_repo.override_reads == 2
    assert holidays_repo.date_reads == 2


def test_calculation_is_idempotent(aggregator, admin, sam, jordan, add_completed_shift, container):
    container.holiday_calendar.add_holiday(actor=admin, on_date=SATURDAY, name="Founders Day")
    add_completed_shift(sam.user_id, MONDAY, 7.75)
    add_completed_shift(jordan.user_id, SATURDAY, 5.25)
    add_completed_shift(sam.user_id, SUNDAY, 3.1)

    first = aggregator.calculate(actor=admin, **RANGE)
    second = aggregator.calculate(actor=admin, **RANGE)

    assert [i.to_dict() for i in first] == [i.to_dict() for i in second]
    assert write_payroll_csv(first) == write_payroll_csv(second)


def test_range_validation(aggregator, admin):
    with pytest.raises(InvalidRangeError, match="End date must be after start date"):
        aggregator.calculate(actor=admin, start=date(2025, 2, 1), end=date(2025, 1, 1))

    with pytest.raises(InvalidRangeError, match="cannot exceed 1 year"):
        aggregator.calculate(actor=admin, start=date(2025, 1, 1), end=date(2026, 1, 3))

    assert aggregator.calculate(actor=admin, start=date(2024, 1, 1), end=date(2024, 12, 31)) == []


def test_payroll_is_admin_only(aggregator, sam):
    with pytest.raises(AuthorizationError):
        aggregator.calculate(actor=sam, **RANGE)
