"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

EMBEDDING_DIMENSION = 128
DEFAULT_MATCH_THRESHOLD = 0.5

DEFAULT_WORKDAY_START = time(8, 0)
DEFAULT_LATE_CUTOFF = time(8, 15)
DEFAULT_CLOSING_TIME = time(18, 0)
DEFAULT_RECONCILE_AT = time(23, 59)

# Mon=0 .. Sun=6
DEFAULT_NON_WORKING_WEEKDAYS = frozenset({5, 6})

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_VERIFICATION_WORKERS = 3
DEFAULT_NOTIFY_TIMEOUT_SECONDS = 5.0

STANDARD_WORKDAY_HOURS = 8
TOP_PERFORMERS_LIMIT = 3
