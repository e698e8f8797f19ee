from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    def decide_checkin(self) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    @abstractmethod
    def decide_checkout(self, *, total_hours: Decimal) -> StatusDecision:
        raise NotImplementedError
