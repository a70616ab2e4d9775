"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

DEFAULT_HISTORY_DAYS = 60
DEFAULT_RECENT_LIMIT = 10

REMARK_ON_TIME = "On Time"
REMARK_LATE = "Late"
