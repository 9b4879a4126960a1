from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ...timeclock.model import BreakInterval


@dataclass(frozen=True)
class ShiftHours:
    total_hours: float
    total_paid_hours: float
    total_break_minutes: int


class DurationCalculator(ABC):
    """Calculator interface (Strategy Pattern for shift durations)."""

    @abstractmethod
    def compute(
        self,
        *,
        clock_in: datetime,
        clock_out: datetime,
        breaks: Sequence[BreakInterval],
        paid_break_minutes: int,
    ) -> ShiftHours:
        raise NotImplementedError
