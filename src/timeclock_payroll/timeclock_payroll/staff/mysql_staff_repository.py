from __future__ import annotations

import json
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import TeamMember, parse_roles
from .repository import TeamMemberRepository, VenueRepository


class MySQLTeamMemberRepository(TeamMemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[TeamMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, first_name, last_name, roles, is_active
                FROM users
                WHERE id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            raw_roles = r.get("roles") or "[]"
            if isinstance(raw_roles, (bytes, str)):
                raw_roles = json.loads(raw_roles)
            return TeamMember(
                user_id=int(r["id"]),
                first_name=r["first_name"],
                last_name=r.get("last_name"),
                roles=parse_roles(raw_roles),
                is_active=bool(r.get("is_active", 1)),
            )


class MySQLVenueRepository(VenueRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, venue_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM venues WHERE id=%s", (int(venue_id),))
            return fetchone(cur) is not None
