from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.authz import require_admin, require_staff
from ..common.validators import require_non_negative_minutes, require_positive_rate
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..staff.model import Actor
from ..staff.repository import TeamMemberRepository
from .model import FALLBACK_PAY_RATES, RATE_FIELDS, DefaultPayRates, EffectivePayRates, PayRateOverride
from .repository import PayRateRepository

logger = logging.getLogger(__name__)

_RATE_LABELS = {
    "weekday_rate": "Weekday rate",
    "saturday_rate": "Saturday rate",
    "sunday_rate": "Sunday rate",
    "public_holiday_rate": "Public holiday rate",
}


def _validate_rate_changes(changes: dict, *, allow_null: bool) -> dict:
    unknown = set(changes) - set(RATE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown pay rate field(s): {', '.join(sorted(unknown))}")

    clean: dict = {}
    for name, value in changes.items():
        if value is None:
            if not allow_null:
                raise ValidationError(f"{_RATE_LABELS.get(name, 'Paid break minutes')} is required")
            clean[name] = None
        elif name == "paid_break_minutes":
            clean[name] = require_non_negative_minutes(value, "Paid break minutes")
        else:
            clean[name] = require_positive_rate(value, _RATE_LABELS[name])
    return clean


class RateResolver:
    """Field-wise merge of a member's override onto the default rates.

    Always uses the current records; `on_date` is accepted for the call
    contract but rates are not versioned over time.
    """

    def __init__(self, rates: PayRateRepository):
        self._rates = rates

    def default_rates(self) -> DefaultPayRates:
        default = self._rates.get_default()
        if default is None:
            logger.warning("Default pay rates not seeded; using built-in fallback")
            return FALLBACK_PAY_RATES
        return default

    def resolve(self, team_member_id: int, on_date: date) -> EffectivePayRates:
        default = self.default_rates()
        override = self._rates.get_override(int(team_member_id))
        if override is None:
            return default.effective()
        return override.merge_onto(default)


class PayRateService:
    """Use case: administer default and per-member pay rates."""

    def __init__(self, rates: PayRateRepository, resolver: RateResolver, members: TeamMemberRepository):
        self._rates = rates
        self._resolver = resolver
        self._members = members

    def get_default(self, *, actor: Actor) -> DefaultPayRates:
        require_staff(actor)
        return self._resolver.default_rates()

    def update_default(self, *, actor: Actor, changes: dict) -> DefaultPayRates:
        require_admin(actor)
        clean = _validate_rate_changes(changes, allow_null=False)
        if not self._rates.update_default(changes=clean, updated_by=actor.user_id):
            raise NotFoundError("Default pay rates have not been set up")
        logger.info("Default pay rates updated by %s: %s", actor.user_id, sorted(clean))
        return self._resolver.default_rates()

    def get_override(self, *, actor: Actor, team_member_id: int) -> Optional[PayRateOverride]:
        require_admin(actor)
        return self._rates.get_override(int(team_member_id))

    def list_overrides(self, *, actor: Actor) -> Sequence[PayRateOverride]:
        require_admin(actor)
        return self._rates.list_overrides()

    def upsert_override(
        self,
        *,
        actor: Actor,
        team_member_id: int,
        changes: dict,
        notes: Optional[str] = None,
    ) -> PayRateOverride:
        """Create the override on first customization, otherwise update the given fields.

        A field passed as None clears it back to the default.
        """

        require_admin(actor)
        member = self._members.get_by_id(int(team_member_id))
        if not member or not member.is_staff:
            raise NotFoundError("Team member not found")

        clean = _validate_rate_changes(changes, allow_null=True)
        existing = self._rates.get_override(int(team_member_id)) or PayRateOverride(team_member_id=int(team_member_id))
        updated = replace(existing, **clean)
        if notes is not None:
            updated = replace(updated, notes=notes.strip() or None)

        self._rates.upsert_override(updated, updated_by=actor.user_id)
        logger.info("Pay rate override for member %s saved by %s", team_member_id, actor.user_id)
        return updated

    def delete_override(self, *, actor: Actor, team_member_id: int) -> None:
        require_admin(actor)
        if not self._rates.delete_override(int(team_member_id)):
            raise NotFoundError("Custom pay rates not found")
        logger.info("Pay rate override for member %s removed by %s", team_member_id, actor.user_id)

    def get_effective(self, *, actor: Actor, team_member_id: int, on_date: date) -> EffectivePayRates:
        require_staff(actor)
        if not actor.is_admin and int(team_member_id) != actor.user_id:
            raise AuthorizationError("You can only view your own pay rates")
        return self._resolver.resolve(int(team_member_id), on_date)
