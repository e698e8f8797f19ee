from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.constants import HALF_DAY_THRESHOLD_HOURS
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self) -> AttendanceStrategy:
        return PresentStrategy()

    def for_checkout(self, *, total_hours: Decimal) -> AttendanceStrategy:
        # Fixed threshold; no shift or per-employee override applies.
        if total_hours < HALF_DAY_THRESHOLD_HOURS:
            return HalfDayStrategy()
        return PresentStrategy()
