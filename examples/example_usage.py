"""Example: drive the service layer directly (no Flask).

Controllers are thin; the rules live in the services wired by the container.
"""

import importlib
from datetime import date, timedelta

from config import get_settings_module

from src.timeclock_payroll.timeclock_payroll.container import build_container
from src.timeclock_payroll.timeclock_payroll.core.enums import Role
from src.timeclock_payroll.timeclock_payroll.payroll.export import write_payroll_csv
from src.timeclock_payroll.timeclock_payroll.staff.model import Actor


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    admin = Actor(user_id=1, roles=frozenset({Role.ADMIN}))

    end = date.today()
    items = container.payroll_aggregator.calculate(actor=admin, start=end - timedelta(days=13), end=end)
    print(write_payroll_csv(items))

    for shift in container.shift_ledger.list_long_running(actor=admin):
        print(f"Still clocked in: {shift.team_member_name} ({shift.hours_elapsed}h)")


if __name__ == "__main__":
    main()
