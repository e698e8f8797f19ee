from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local, working_days_in_month
from ..common.formatting import format_currency
from ..common.validators import require_non_negative_amount
from ..core.enums import NotificationType
from ..notifications.service import NotificationService
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import DEDUCTION_FIELDS, EARNING_FIELDS, PayrollSummary, SalaryStructure
from .repository import SalaryRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        salaries: SalaryRepository,
        attendance: AttendanceService,
        notifications: NotificationService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._salaries = salaries
        self._attendance = attendance
        self._notifications = notifications
        self._calculator = calculator or StandardPayrollCalculator()

    def get_structure(self, user_id: str) -> SalaryStructure:
        return self._salaries.get_for_user(user_id) or SalaryStructure.empty(user_id)

    def get_payroll(self, user_id: str, *, month: Optional[date] = None) -> PayrollSummary:
        month = month or now_local().date()
        structure = self.get_structure(user_id)
        stats = self._attendance.monthly_stats(user_id, month)
        return self._calculator.compute(
            structure,
            stats,
            month=month,
            working_days=working_days_in_month(month),
        )

    def update_salary(
        self,
        user_id: str,
        amounts: Mapping[str, object],
        *,
        effective_from: Optional[date] = None,
    ) -> SalaryStructure:
        """Administrative overwrite of every amount; absent keys are written as 0."""
        values = {
            name: require_non_negative_amount(amounts.get(name), name)
            for name in EARNING_FIELDS + DEDUCTION_FIELDS
        }
        structure = SalaryStructure(
            user_id=user_id,
            effective_from=effective_from or now_local().date(),
            **values,
        )
        self._salaries.upsert(structure)
        logger.info("Salary structure replaced for user=%s effective=%s", user_id, structure.effective_from)

        self._notifications.notify(
            user_id,
            title="Salary Updated",
            message=(
                f"Your salary structure has been updated effective {structure.effective_from.isoformat()}. "
                f"Gross: {format_currency(structure.gross_salary)}, "
                f"deductions: {format_currency(structure.total_deductions)}."
            ),
            type=NotificationType.INFO,
        )
        return structure
