from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles assigned by the identity provider."""

    ADMIN = "admin"
    TEAM_MEMBER = "team_member"
    CLIENT = "client"


class ShiftStatus(str, Enum):
    """Lifecycle of a time entry as stored in the database."""

    CLOCKED_IN = "clocked_in"
    ON_BREAK = "on_break"
    COMPLETED = "completed"

    @property
    def is_active(self) -> bool:
        return self in (ShiftStatus.CLOCKED_IN, ShiftStatus.ON_BREAK)


class DayCategory(str, Enum):
    """Pay category of a shift date. Declared in classification priority order."""

    PUBLIC_HOLIDAY = "public_holiday"
    SUNDAY = "sunday"
    SATURDAY = "saturday"
    WEEKDAY = "weekday"


class KioskAction(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    END_BREAK = "end_break"
