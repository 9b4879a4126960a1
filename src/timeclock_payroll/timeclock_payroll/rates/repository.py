from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DefaultPayRates, PayRateOverride


class PayRateRepository(Protocol):
    def get_default(self) -> Optional[DefaultPayRates]:
        raise NotImplementedError

    def update_default(self, *, changes: dict, updated_by: int) -> bool:
        raise NotImplementedError

    def get_override(self, team_member_id: int) -> Optional[PayRateOverride]:
        raise NotImplementedError

    def list_overrides(self) -> Sequence[PayRateOverride]:
        raise NotImplementedError

    def upsert_override(self, override: PayRateOverride, *, updated_by: int) -> None:
        raise NotImplementedError

    def delete_override(self, team_member_id: int) -> bool:
        raise NotImplementedError
