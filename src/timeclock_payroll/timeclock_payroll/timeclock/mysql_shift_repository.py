from __future__ import annotations

import json
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import hours_between
from ..core.enums import ShiftStatus
from ..core.exceptions import AlreadyActiveError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, to_float
from .model import BreakInterval, LongRunningShift, PayrollShiftRow, TimeEntry
from .repository import ShiftRepository

_ENTRY_COLUMNS = """
    id, team_member_id, venue_id, shift_date, clock_in_time, clock_out_time,
    breaks, current_break_start, status, total_hours, total_paid_hours,
    total_break_minutes, notes, created_by, updated_by, version
"""

ACTIVE_SHIFT_MESSAGE = "You already have an active shift. Please clock out first."


def _dump_breaks(breaks: Sequence[BreakInterval]) -> str:
    return json.dumps([b.to_dict() for b in breaks])


def _load_breaks(raw: Any) -> tuple[BreakInterval, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    items = json.loads(raw) if isinstance(raw, str) else raw
    return tuple(
        BreakInterval(start=datetime.fromisoformat(b["start"]), end=datetime.fromisoformat(b["end"]))
        for b in items or []
        if b.get("end")
    )


def _row_to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["id"]),
        team_member_id=int(r["team_member_id"]),
        venue_id=int(r["venue_id"]),
        shift_date=r["shift_date"],
        clock_in_time=r["clock_in_time"],
        clock_out_time=r.get("clock_out_time"),
        breaks=_load_breaks(r.get("breaks")),
        current_break_start=r.get("current_break_start"),
        status=ShiftStatus(r["status"]),
        total_hours=to_float(r.get("total_hours")),
        total_paid_hours=to_float(r.get("total_paid_hours")),
        total_break_minutes=int(r.get("total_break_minutes") or 0),
        notes=r.get("notes"),
        created_by=r.get("created_by"),
        updated_by=r.get("updated_by"),
        version=int(r.get("version") or 0),
    )


def _entry_params(entry: TimeEntry) -> tuple:
    return (
        entry.clock_in_time,
        entry.clock_out_time,
        _dump_breaks(entry.breaks),
        entry.current_break_start,
        entry.status.value,
        entry.total_hours,
        entry.total_paid_hours,
        int(entry.total_break_minutes),
        entry.notes,
        entry.updated_by,
        int(entry.version),
    )


class MySQLShiftRepository(ShiftRepository):
    """staff_time_entries table.

    One-active-shift-per-member is enforced by the UNIQUE index on the
    generated `active_member_id` column (see database/schema.sql).
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM staff_time_entries WHERE id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def get_active_for_member(self, team_member_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM staff_time_entries
                WHERE active_member_id=%s
                """,
                (int(team_member_id),),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def create_clock_in(
        self,
        *,
        team_member_id: int,
        venue_id: int,
        shift_date: date,
        clock_in_time: datetime,
        created_by: int,
    ) -> TimeEntry:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO staff_time_entries
                        (team_member_id, venue_id, shift_date, clock_in_time, breaks, status, created_by)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        int(team_member_id),
                        int(venue_id),
                        shift_date,
                        clock_in_time,
                        "[]",
                        ShiftStatus.CLOCKED_IN.value,
                        int(created_by),
                    ),
                )
                entry_id = int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise AlreadyActiveError(ACTIVE_SHIFT_MESSAGE)
            raise

        return TimeEntry(
            entry_id=entry_id,
            team_member_id=int(team_member_id),
            venue_id=int(venue_id),
            shift_date=shift_date,
            clock_in_time=clock_in_time,
            status=ShiftStatus.CLOCKED_IN,
            created_by=int(created_by),
        )

    def save(self, entry: TimeEntry, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff_time_entries
                SET clock_in_time=%s, clock_out_time=%s, breaks=%s, current_break_start=%s,
                    status=%s, total_hours=%s, total_paid_hours=%s, total_break_minutes=%s,
                    notes=%s, updated_by=%s, version=%s
                WHERE id=%s AND version=%s
                """,
                _entry_params(entry) + (int(entry.entry_id), int(expected_version)),
            )
            return cur.rowcount > 0

    def insert_completed(self, entry: TimeEntry) -> TimeEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO staff_time_entries
                    (team_member_id, venue_id, shift_date, clock_in_time, clock_out_time, breaks,
                     status, total_hours, total_paid_hours, total_break_minutes, notes, created_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    int(entry.team_member_id),
                    int(entry.venue_id),
                    entry.shift_date,
                    entry.clock_in_time,
                    entry.clock_out_time,
                    _dump_breaks(entry.breaks),
                    ShiftStatus.COMPLETED.value,
                    entry.total_hours,
                    entry.total_paid_hours,
                    int(entry.total_break_minutes),
                    entry.notes,
                    entry.created_by,
                ),
            )
            new_id = int(cur.lastrowid)

        return replace(entry, entry_id=new_id, status=ShiftStatus.COMPLETED)

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM staff_time_entries WHERE id=%s", (int(entry_id),))
            return cur.rowcount > 0

    def list_entries(
        self,
        *,
        team_member_id: Optional[int] = None,
        venue_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        clauses = ["1=1"]
        params: list[object] = []

        if team_member_id is not None:
            clauses.append("team_member_id=%s")
            params.append(int(team_member_id))
        if venue_id is not None:
            clauses.append("venue_id=%s")
            params.append(int(venue_id))
        if start_date is not None:
            clauses.append("shift_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("shift_date<=%s")
            params.append(end_date)

        sql = f"""
            SELECT {_ENTRY_COLUMNS}
            FROM staff_time_entries
            WHERE {" AND ".join(clauses)}
            ORDER BY shift_date DESC, clock_in_time DESC
        """
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_long_running(self, *, clocked_in_before: datetime, now: datetime) -> Sequence[LongRunningShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.id, e.team_member_id, e.venue_id, e.clock_in_time, e.status,
                       u.first_name, u.last_name
                FROM staff_time_entries e
                JOIN users u ON u.id = e.team_member_id
                WHERE e.status IN ('clocked_in', 'on_break')
                  AND e.clock_in_time <= %s
                ORDER BY e.clock_in_time ASC
                """,
                (clocked_in_before,),
            )
            rows = fetchall(cur)

        return [
            LongRunningShift(
                entry_id=int(r["id"]),
                team_member_id=int(r["team_member_id"]),
                team_member_name=f"{r['first_name']} {r.get('last_name') or ''}".strip(),
                venue_id=int(r["venue_id"]),
                clock_in_time=r["clock_in_time"],
                hours_elapsed=round(hours_between(r["clock_in_time"], now), 2),
                status=ShiftStatus(r["status"]),
            )
            for r in rows
        ]

    def get_payroll_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        team_member_id: Optional[int] = None,
    ) -> Sequence[PayrollShiftRow]:
        clauses = [
            "e.shift_date BETWEEN %s AND %s",
            "e.status = 'completed'",
            "e.total_paid_hours IS NOT NULL",
        ]
        params: list[object] = [start_date, end_date]
        if team_member_id is not None:
            clauses.append("e.team_member_id=%s")
            params.append(int(team_member_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT e.id, e.team_member_id, e.shift_date, e.total_hours, e.total_paid_hours,
                       u.first_name, u.last_name
                FROM staff_time_entries e
                JOIN users u ON u.id = e.team_member_id
                WHERE {" AND ".join(clauses)}
                ORDER BY e.shift_date ASC, e.clock_in_time ASC, e.id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        return [
            PayrollShiftRow(
                entry_id=int(r["id"]),
                team_member_id=int(r["team_member_id"]),
                team_member_name=f"{r['first_name']} {r.get('last_name') or ''}".strip(),
                shift_date=r["shift_date"],
                total_hours=to_float(r.get("total_hours")) or 0.0,
                total_paid_hours=to_float(r.get("total_paid_hours")) or 0.0,
            )
            for r in rows
        ]
