"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600

DEFAULT_SESSION_DAYS = 7
DEFAULT_TIMEZONE = "UTC"
DISPLAY_DECIMALS = 2

# Conditional writes that lose a race are re-validated against fresh state.
MAX_WRITE_ATTEMPTS = 3

MIN_PASSWORD_LENGTH = 6
