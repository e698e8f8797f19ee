from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (user_id, date).

    `total_hours` stays None until check-out is recorded.
    """

    id: str
    user_id: str
    date: date
    status: AttendanceStatus
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_hours: Optional[Decimal] = None

    @property
    def is_open(self) -> bool:
        return self.check_in is not None and self.check_out is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "check_in": self.check_in.isoformat() if self.check_in else None,
            "check_out": self.check_out.isoformat() if self.check_out else None,
            "total_hours": float(self.total_hours) if self.total_hours is not None else None,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (joined with the employee profile)."""

    user_id: str
    employee_id: Optional[str]
    full_name: str
    department: Optional[str]
    date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    total_hours: Optional[Decimal]
    status: AttendanceStatus
