from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_PAY_RATES_ID
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float, to_int
from .model import RATE_FIELDS, DefaultPayRates, PayRateOverride
from .repository import PayRateRepository


def _row_to_override(r: dict) -> PayRateOverride:
    name = None
    if r.get("first_name"):
        name = f"{r['first_name']} {r.get('last_name') or ''}".strip()
    return PayRateOverride(
        team_member_id=int(r["team_member_id"]),
        weekday_rate=to_float(r.get("weekday_rate")),
        saturday_rate=to_float(r.get("saturday_rate")),
        sunday_rate=to_float(r.get("sunday_rate")),
        public_holiday_rate=to_float(r.get("public_holiday_rate")),
        paid_break_minutes=to_int(r.get("paid_break_minutes")),
        notes=r.get("notes"),
        team_member_name=name,
    )


class MySQLPayRateRepository(PayRateRepository):
    """staff_default_pay_rates (single row) + staff_pay_rates (one row per member)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_default(self) -> Optional[DefaultPayRates]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT weekday_rate, saturday_rate, sunday_rate, public_holiday_rate,
                       paid_break_minutes, updated_by
                FROM staff_default_pay_rates
                WHERE id=%s
                """,
                (DEFAULT_PAY_RATES_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return DefaultPayRates(
                weekday_rate=to_float(r["weekday_rate"]),
                saturday_rate=to_float(r["saturday_rate"]),
                sunday_rate=to_float(r["sunday_rate"]),
                public_holiday_rate=to_float(r["public_holiday_rate"]),
                paid_break_minutes=int(r["paid_break_minutes"]),
                updated_by=r.get("updated_by"),
            )

    def update_default(self, *, changes: dict, updated_by: int) -> bool:
        columns = [name for name in RATE_FIELDS if name in changes]
        if not columns:
            return True
        assignments = ", ".join(f"{name}=%s" for name in columns)
        params = [changes[name] for name in columns] + [int(updated_by), DEFAULT_PAY_RATES_ID]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE staff_default_pay_rates SET {assignments}, updated_by=%s WHERE id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def get_override(self, team_member_id: int) -> Optional[PayRateOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.team_member_id, r.weekday_rate, r.saturday_rate, r.sunday_rate,
                       r.public_holiday_rate, r.paid_break_minutes, r.notes,
                       u.first_name, u.last_name
                FROM staff_pay_rates r
                LEFT JOIN users u ON u.id = r.team_member_id
                WHERE r.team_member_id=%s
                """,
                (int(team_member_id),),
            )
            r = fetchone(cur)
            return _row_to_override(r) if r else None

    def list_overrides(self) -> Sequence[PayRateOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.team_member_id, r.weekday_rate, r.saturday_rate, r.sunday_rate,
                       r.public_holiday_rate, r.paid_break_minutes, r.notes,
                       u.first_name, u.last_name
                FROM staff_pay_rates r
                LEFT JOIN users u ON u.id = r.team_member_id
                ORDER BY r.created_at DESC
                """
            )
            return [_row_to_override(r) for r in fetchall(cur)]

    def upsert_override(self, override: PayRateOverride, *, updated_by: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO staff_pay_rates
                    (team_member_id, weekday_rate, saturday_rate, sunday_rate,
                     public_holiday_rate, paid_break_minutes, notes, updated_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    weekday_rate=VALUES(weekday_rate),
                    saturday_rate=VALUES(saturday_rate),
                    sunday_rate=VALUES(sunday_rate),
                    public_holiday_rate=VALUES(public_holiday_rate),
                    paid_break_minutes=VALUES(paid_break_minutes),
                    notes=VALUES(notes),
                    updated_by=VALUES(updated_by)
                """,
                (
                    int(override.team_member_id),
                    override.weekday_rate,
                    override.saturday_rate,
                    override.sunday_rate,
                    override.public_holiday_rate,
                    override.paid_break_minutes,
                    override.notes,
                    int(updated_by),
                ),
            )

    def delete_override(self, team_member_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM staff_pay_rates WHERE team_member_id=%s", (int(team_member_id),))
            return cur.rowcount > 0
