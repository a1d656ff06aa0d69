"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_SHIFT_HOURS = 15

# Saturday from this local hour on, and all of Sunday, is blocked
BLACKOUT_SATURDAY_FROM_HOUR = 18

DEFAULT_SESSION_DAYS = 30
MIN_PASSWORD_LENGTH = 8
MAX_TIMEZONE_LENGTH = 100
