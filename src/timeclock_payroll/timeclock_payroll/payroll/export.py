from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from .service import PayrollLineItem

CSV_HEADER = [
    "Staff Member",
    "Weekday Hours",
    "Saturday Hours",
    "Sunday Hours",
    "Holiday Hours",
    "Total Paid Hours",
    "Total Pay",
    "Shifts Count",
]


def payroll_csv_filename(start: date, end: date) -> str:
    return f"payroll-report-{start.strftime('%Y-%m-%d')}-to-{end.strftime('%Y-%m-%d')}.csv"


def write_payroll_csv(items: Iterable[PayrollLineItem]) -> str:
    """Render payroll line items as CSV text (one row per team member).

    The caller encodes with "utf-8-sig" so spreadsheet apps pick up the BOM.
    """

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for item in items:
        writer.writerow(
            [
                item.team_member_name,
                f"{item.weekday_hours:.2f}",
                f"{item.saturday_hours:.2f}",
                f"{item.sunday_hours:.2f}",
                f"{item.public_holiday_hours:.2f}",
                f"{item.total_paid_hours:.2f}",
                f"${item.total_pay:.2f}",
                item.entries_count,
            ]
        )
    return out.getvalue()
