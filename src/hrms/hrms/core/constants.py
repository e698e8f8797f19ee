"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

HALF_DAY_THRESHOLD_HOURS = Decimal("4")
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LIST_LIMIT = 200
DEFAULT_REPORT_MONTHS = 6
UNASSIGNED_DEPARTMENT = "Unassigned"

DEFAULT_LEAVE_ALLOCATION = {
    "paid_leave": 12,
    "sick_leave": 12,
    "casual_leave": 6,
    "unpaid_leave": 0,
}
