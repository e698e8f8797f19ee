from __future__ import annotations

from decimal import Decimal

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Checked out before reaching the half-day threshold."""

    def decide_checkout(self, *, total_hours: Decimal) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)
