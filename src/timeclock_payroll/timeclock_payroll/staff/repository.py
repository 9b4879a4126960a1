from __future__ import annotations

from typing import Optional, Protocol

from .model import TeamMember


class TeamMemberRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[TeamMember]:
        raise NotImplementedError


class VenueRepository(Protocol):
    def exists(self, venue_id: int) -> bool:
        raise NotImplementedError
