"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_BATCH_OPERATIONS = 500

TREND_EPSILON = 0.1
TREND_PERFECT_TOLERANCE = 1e-6
TREND_SCHEMA_VERSION = "trend-v2"

MAX_TERM_WEEKS = 12

MIN_YEAR = 2000
MAX_YEAR = 2100
MIN_TERM = 1
MAX_TERM = 4
MIN_WEEK = 1
MAX_WEEK = 12

PCT_MIN = 0.0
PCT_MAX = 100.0

DEFAULT_EXCLUDED_ROLL_CLASSES = frozenset({"staff", "admin", "office", "left", "unassigned"})

DEFAULT_TOKEN_MAX_AGE_SECONDS = 3600
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
