from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidRange
from .model import AttendanceRecord

_HOUR_PLACES = Decimal("0.01")
_SECONDS_PER_HOUR = Decimal(3600)


def worked_hours(check_in: datetime, check_out: datetime) -> Decimal:
    """Elapsed hours, rounded half-up to 2 decimal places."""
    if check_out < check_in:
        raise InvalidRange("Check-out cannot be earlier than check-in")
    seconds = Decimal(str((check_out - check_in).total_seconds()))
    return (seconds / _SECONDS_PER_HOUR).quantize(_HOUR_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AttendanceStats:
    present_days: int = 0
    half_days: int = 0
    absent_days: int = 0
    leave_days: int = 0
    total_hours: Decimal = Decimal("0")

    def inferred_absent_days(self, working_days: int) -> int:
        """Working days with no present, half-day or leave record (never below 0)."""
        return max(working_days - (self.present_days + self.half_days + self.leave_days), 0)

    def to_dict(self) -> dict:
        return {
            "present": self.present_days,
            "half_day": self.half_days,
            "absent": self.absent_days,
            "leave": self.leave_days,
            "total_hours": float(self.total_hours),
        }


def summarize(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    counts = {status: 0 for status in AttendanceStatus}
    total = Decimal("0")
    for r in records:
        counts[r.status] += 1
        if r.total_hours is not None:
            total += r.total_hours
    return AttendanceStats(
        present_days=counts[AttendanceStatus.PRESENT],
        half_days=counts[AttendanceStatus.HALF_DAY],
        absent_days=counts[AttendanceStatus.ABSENT],
        leave_days=counts[AttendanceStatus.LEAVE],
        total_hours=total,
    )
