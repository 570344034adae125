"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

HOURS_QUANT = Decimal("0.01")
MAX_NAME_LENGTH = 100
DEFAULT_REQUEST_LIST_LIMIT = 500
SESSION_USER_KEY = "user_id"

# Column limits (database/schema.sql)
MAX_ROW_ID = 2147483647
MAX_PACKAGE_HOURS = 9999
MAX_STUDENT_HOURS = Decimal("9999.99")
MAX_CLASS_DURATION = Decimal("999.99")
MAX_PRICE = Decimal("99999999.99")
MAX_AGE = 150
