from __future__ import annotations

from decimal import Decimal

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Full day: worked at least the half-day threshold."""

    def decide_checkout(self, *, total_hours: Decimal) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
