from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import PublicHoliday
from .repository import HolidayRepository

DUPLICATE_HOLIDAY_MESSAGE = "A holiday already exists on this date"


def _row_to_holiday(r: dict) -> PublicHoliday:
    return PublicHoliday(
        holiday_id=int(r["id"]),
        date=r["date"],
        name=r["name"],
        is_recurring=bool(r.get("is_recurring")),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_date(self, on_date: date) -> Optional[PublicHoliday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, date, name, is_recurring FROM public_holidays WHERE date=%s", (on_date,))
            r = fetchone(cur)
            return _row_to_holiday(r) if r else None

    def get_by_id(self, holiday_id: int) -> Optional[PublicHoliday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, date, name, is_recurring FROM public_holidays WHERE id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _row_to_holiday(r) if r else None

    def list_between(self, *, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Sequence[PublicHoliday]:
        clauses = ["1=1"]
        params: list[object] = []
        if start_date is not None:
            clauses.append("date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("date<=%s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, date, name, is_recurring
                FROM public_holidays
                WHERE {" AND ".join(clauses)}
                ORDER BY date ASC
                """,
                tuple(params),
            )
            return [_row_to_holiday(r) for r in fetchall(cur)]

    def create(self, *, on_date: date, name: str, is_recurring: bool, created_by: int) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO public_holidays(date, name, is_recurring, created_by)
                    VALUES (%s, %s, %s, %s)
                    """,
                    (on_date, name, 1 if is_recurring else 0, int(created_by)),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise ValidationError(DUPLICATE_HOLIDAY_MESSAGE)
            raise

    def update(self, *, holiday_id: int, name: str, is_recurring: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE public_holidays SET name=%s, is_recurring=%s WHERE id=%s",
                (name, 1 if is_recurring else 0, int(holiday_id)),
            )
            return cur.rowcount > 0

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM public_holidays WHERE id=%s", (int(holiday_id),))
            return cur.rowcount > 0
