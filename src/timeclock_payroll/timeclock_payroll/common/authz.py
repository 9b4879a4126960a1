from __future__ import annotations

from typing import Optional

from ..core.exceptions import AuthorizationError
from ..staff.model import Actor


def require_admin(actor: Actor) -> Actor:
    if not actor.is_admin:
        raise AuthorizationError("Admin access required")
    return actor


def require_staff(actor: Actor) -> Actor:
    if not actor.is_staff:
        raise AuthorizationError("Staff access required")
    return actor


def resolve_subject(actor: Actor, subject_id: Optional[int]) -> int:
    """Who a time-clock operation applies to.

    Acting on behalf of someone else (kiosk mode) is an admin capability;
    everybody else can only act on themselves.
    """

    require_staff(actor)
    if subject_id is None or int(subject_id) == actor.user_id:
        return actor.user_id
    if not actor.is_admin:
        raise AuthorizationError("Only admins can act on behalf of another team member")
    return int(subject_id)
