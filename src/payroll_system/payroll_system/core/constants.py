"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

EARTH_RADIUS_METERS = 6_371_000

# Office reference coordinate used when a log carries none.
DEFAULT_OFFICE_LATITUDE = -8.5207971
DEFAULT_OFFICE_LONGITUDE = 115.1378314
DEFAULT_RADIUS_MIN_METERS = 20
DEFAULT_RADIUS_MAX_METERS = 50

FIXED_TERM_PERSONAL_LEAVE_PER_MONTH = 2
PERMANENT_PERSONAL_LEAVE_PER_YEAR = 12

PART_TIME_LEAVE_DEDUCTION_PER_DAY = Decimal("50000")
FULL_TIME_LEAVE_DEDUCTION_PER_DAY = Decimal("100000")
