"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Used when the default pay-rate row has not been seeded yet.
FALLBACK_WEEKDAY_RATE = 25.0
FALLBACK_SATURDAY_RATE = 30.0
FALLBACK_SUNDAY_RATE = 35.0
FALLBACK_PUBLIC_HOLIDAY_RATE = 50.0
FALLBACK_PAID_BREAK_MINUTES = 30

DEFAULT_PAY_RATES_ID = 1

DEFAULT_LONG_RUNNING_HOURS = 12
DEFAULT_REPORT_DAYS = 14
MAX_REPORT_RANGE_DAYS = 366

DEFAULT_KIOSK_BADGE_PREFIX = "TM:"

HOURS_PRECISION = 2
