from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ...attendance.stats import AttendanceStats
from ..model import PayrollSummary, SalaryStructure


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(
        self,
        structure: SalaryStructure,
        stats: AttendanceStats,
        *,
        month: date,
        working_days: int,
    ) -> PayrollSummary:
        raise NotImplementedError
