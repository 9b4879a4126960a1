from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_KIOSK_BADGE_PREFIX, DEFAULT_LONG_RUNNING_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayCalendar
from .kiosk.service import KioskService
from .payroll.service import PayrollAggregator
from .rates.mysql_rate_repository import MySQLPayRateRepository
from .rates.repository import PayRateRepository
from .rates.service import PayRateService, RateResolver
from .staff.mysql_staff_repository import MySQLTeamMemberRepository, MySQLVenueRepository
from .staff.repository import TeamMemberRepository, VenueRepository
from .timeclock.mysql_shift_repository import MySQLShiftRepository
from .timeclock.repository import ShiftRepository
from .timeclock.service import ShiftLedger


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    members_repo: TeamMemberRepository
    venues_repo: VenueRepository
    shifts_repo: ShiftRepository
    rates_repo: PayRateRepository
    holidays_repo: HolidayRepository

    rate_resolver: RateResolver
    pay_rate_service: PayRateService
    holiday_calendar: HolidayCalendar
    shift_ledger: ShiftLedger
    payroll_aggregator: PayrollAggregator
    kiosk_service: KioskService


def assemble_container(
    *,
    members_repo: TeamMemberRepository,
    venues_repo: VenueRepository,
    shifts_repo: ShiftRepository,
    rates_repo: PayRateRepository,
    holidays_repo: HolidayRepository,
    conn: Optional[DatabaseConnection] = None,
    long_running_hours: int = DEFAULT_LONG_RUNNING_HOURS,
    badge_prefix: str = DEFAULT_KIOSK_BADGE_PREFIX,
) -> Container:
    """Wire services on top of the given repositories (MySQL in the app, fakes in tests)."""

    rate_resolver = RateResolver(rates_repo)
    pay_rate_service = PayRateService(rates_repo, rate_resolver, members_repo)
    holiday_calendar = HolidayCalendar(holidays_repo)
    shift_ledger = ShiftLedger(
        shifts_repo,
        rate_resolver,
        members_repo,
        venues_repo,
        long_running_hours=long_running_hours,
    )
    payroll_aggregator = PayrollAggregator(shifts_repo, rate_resolver, holiday_calendar)
    kiosk_service = KioskService(shift_ledger, members_repo, badge_prefix=badge_prefix)

    return Container(
        conn=conn,
        members_repo=members_repo,
        venues_repo=venues_repo,
        shifts_repo=shifts_repo,
        rates_repo=rates_repo,
        holidays_repo=holidays_repo,
        rate_resolver=rate_resolver,
        pay_rate_service=pay_rate_service,
        holiday_calendar=holiday_calendar,
        shift_ledger=shift_ledger,
        payroll_aggregator=payroll_aggregator,
        kiosk_service=kiosk_service,
    )


def build_container(
    *,
    db_config: dict,
    long_running_hours: int = DEFAULT_LONG_RUNNING_HOURS,
    badge_prefix: str = DEFAULT_KIOSK_BADGE_PREFIX,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble_container(
        conn=conn,
        members_repo=MySQLTeamMemberRepository(conn),
        venues_repo=MySQLVenueRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        rates_repo=MySQLPayRateRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        long_running_hours=long_running_hours,
        badge_prefix=badge_prefix,
    )
