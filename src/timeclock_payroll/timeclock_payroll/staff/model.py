from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class TeamMember:
    """Domain entity: a portal user as seen by the time clock.

    Note: Read-only here. Users are created and maintained by the identity layer.
    """

    user_id: int
    first_name: str
    last_name: Optional[str] = None
    roles: frozenset[Role] = field(default_factory=frozenset)
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()

    @property
    def is_staff(self) -> bool:
        return Role.ADMIN in self.roles or Role.TEAM_MEMBER in self.roles


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of an operation."""

    user_id: int
    roles: frozenset[Role] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def is_staff(self) -> bool:
        return Role.ADMIN in self.roles or Role.TEAM_MEMBER in self.roles


def parse_roles(values) -> frozenset[Role]:
    """Turn raw role strings (session, DB JSON) into Role members, ignoring unknown ones."""

    roles = set()
    for v in values or []:
        try:
            roles.add(Role(str(v)))
        except ValueError:
            continue
    return frozenset(roles)
