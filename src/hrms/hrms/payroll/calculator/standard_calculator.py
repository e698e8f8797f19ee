from __future__ import annotations

from datetime import date
from decimal import Decimal

from ...attendance.stats import AttendanceStats
from ...common.formatting import round_money
from ..model import PayrollSummary, SalaryStructure
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: loss of pay = explicit absent days x (base salary / working days).

    Rounding happens once, on the final figures.
    """

    def compute(
        self,
        structure: SalaryStructure,
        stats: AttendanceStats,
        *,
        month: date,
        working_days: int,
    ) -> PayrollSummary:
        gross = structure.gross_salary
        deductions = structure.total_deductions
        base = gross - deductions

        per_day = base / Decimal(working_days) if working_days > 0 else Decimal("0")
        loss_of_pay = Decimal(stats.absent_days) * per_day
        net = base - loss_of_pay

        return PayrollSummary(
            user_id=structure.user_id,
            month=month.replace(day=1),
            gross_salary=round_money(gross),
            total_deductions=round_money(deductions),
            base_salary=round_money(base),
            working_days=working_days,
            present_days=stats.present_days,
            half_days=stats.half_days,
            leave_days=stats.leave_days,
            absent_days=stats.absent_days,
            per_day_salary=round_money(per_day),
            loss_of_pay=round_money(loss_of_pay),
            net_payable=round_money(net),
            earnings=structure.earnings,
            deductions=structure.deductions,
        )
