from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

from ..core.constants import (
    FALLBACK_PAID_BREAK_MINUTES,
    FALLBACK_PUBLIC_HOLIDAY_RATE,
    FALLBACK_SATURDAY_RATE,
    FALLBACK_SUNDAY_RATE,
    FALLBACK_WEEKDAY_RATE,
)
from ..core.enums import DayCategory

RATE_FIELDS = ("weekday_rate", "saturday_rate", "sunday_rate", "public_holiday_rate", "paid_break_minutes")


@dataclass(frozen=True)
class EffectivePayRates:
    weekday_rate: float
    saturday_rate: float
    sunday_rate: float
    public_holiday_rate: float
    paid_break_minutes: int

    def rate_for(self, category: DayCategory) -> float:
        return {
            DayCategory.WEEKDAY: self.weekday_rate,
            DayCategory.SATURDAY: self.saturday_rate,
            DayCategory.SUNDAY: self.sunday_rate,
            DayCategory.PUBLIC_HOLIDAY: self.public_holiday_rate,
        }[category]

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class DefaultPayRates(EffectivePayRates):
    """The process-wide singleton row. Seeded once, then only updated."""

    updated_by: Optional[int] = None

    def effective(self) -> EffectivePayRates:
        return EffectivePayRates(**{name: getattr(self, name) for name in RATE_FIELDS})


FALLBACK_PAY_RATES = DefaultPayRates(
    weekday_rate=FALLBACK_WEEKDAY_RATE,
    saturday_rate=FALLBACK_SATURDAY_RATE,
    sunday_rate=FALLBACK_SUNDAY_RATE,
    public_holiday_rate=FALLBACK_PUBLIC_HOLIDAY_RATE,
    paid_break_minutes=FALLBACK_PAID_BREAK_MINUTES,
)


@dataclass(frozen=True)
class PayRateOverride:
    """Per-member customization. Every rate field is optional; None falls back to the default."""

    team_member_id: int
    weekday_rate: Optional[float] = None
    saturday_rate: Optional[float] = None
    sunday_rate: Optional[float] = None
    public_holiday_rate: Optional[float] = None
    paid_break_minutes: Optional[int] = None
    notes: Optional[str] = None
    team_member_name: Optional[str] = None

    def merge_onto(self, default: EffectivePayRates) -> EffectivePayRates:
        return EffectivePayRates(
            **{
                name: getattr(self, name) if getattr(self, name) is not None else getattr(default, name)
                for name in RATE_FIELDS
            }
        )

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
