"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WORK_START_MINUTES = 9 * 60
DEFAULT_WORK_END_MINUTES = 17 * 60
LATE_TOLERANCE_MINUTES = 30
LATENESS_FREE_MINUTES = 120

# Monthly salary divisors used to derive hourly rates.
OVERTIME_HOURS_DIVISOR = 160
PENALTY_HOURS_DIVISOR = 240

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 200

AUTO_BARCODE_PREFIX = "AUTO"
INGREDIENT_CODE_MAX_LEN = 12
INGREDIENT_CODE_FALLBACK = "ING"

DEFAULT_DB_RETRIES = 2
DEFAULT_DB_RETRY_DELAY_SECONDS = 1.0
