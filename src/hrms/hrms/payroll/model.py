from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.formatting import format_currency

EARNING_FIELDS = ("basic_salary", "hra", "transport_allowance", "medical_allowance", "other_allowances")
DEDUCTION_FIELDS = ("pf_deduction", "tax_deduction", "other_deductions")

_ZERO = Decimal("0")


@dataclass(frozen=True)
class SalaryStructure:
    """Monthly salary components for one user. Missing amounts count as 0."""

    user_id: str
    basic_salary: Decimal = _ZERO
    hra: Decimal = _ZERO
    transport_allowance: Decimal = _ZERO
    medical_allowance: Decimal = _ZERO
    other_allowances: Decimal = _ZERO
    pf_deduction: Decimal = _ZERO
    tax_deduction: Decimal = _ZERO
    other_deductions: Decimal = _ZERO
    effective_from: Optional[date] = None

    @classmethod
    def empty(cls, user_id: str) -> "SalaryStructure":
        return cls(user_id=user_id)

    @property
    def earnings(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in EARNING_FIELDS}

    @property
    def deductions(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in DEDUCTION_FIELDS}

    @property
    def gross_salary(self) -> Decimal:
        return sum(self.earnings.values(), _ZERO)

    @property
    def total_deductions(self) -> Decimal:
        return sum(self.deductions.values(), _ZERO)

    def to_dict(self) -> dict:
        out: dict = {"user_id": self.user_id}
        out.update({k: float(v) for k, v in self.earnings.items()})
        out.update({k: float(v) for k, v in self.deductions.items()})
        out["effective_from"] = self.effective_from.isoformat() if self.effective_from else None
        return out


@dataclass(frozen=True)
class PayrollSummary:
    """Attendance-adjusted pay for one user and month. Money rounded to 2 places."""

    user_id: str
    month: date
    gross_salary: Decimal
    total_deductions: Decimal
    base_salary: Decimal
    working_days: int
    present_days: int
    half_days: int
    leave_days: int
    absent_days: int
    per_day_salary: Decimal
    loss_of_pay: Decimal
    net_payable: Decimal
    earnings: dict = field(default_factory=dict)
    deductions: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "month": self.month.strftime("%Y-%m"),
            "earnings": {k: float(v) for k, v in self.earnings.items()},
            "deductions": {k: float(v) for k, v in self.deductions.items()},
            "gross_salary": float(self.gross_salary),
            "total_deductions": float(self.total_deductions),
            "base_salary": float(self.base_salary),
            "working_days": self.working_days,
            "present_days": self.present_days,
            "half_days": self.half_days,
            "leave_days": self.leave_days,
            "absent_days": self.absent_days,
            "per_day_salary": float(self.per_day_salary),
            "loss_of_pay": float(self.loss_of_pay),
            "net_payable": float(self.net_payable),
            "display": {
                "gross_salary": format_currency(self.gross_salary),
                "total_deductions": format_currency(self.total_deductions),
                "loss_of_pay": format_currency(self.loss_of_pay),
                "net_payable": format_currency(self.net_payable),
            },
        }
