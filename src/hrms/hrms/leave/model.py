from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import days_between_inclusive
from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    id: str
    user_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    status: RequestStatus
    reason: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_comments: Optional[str] = None
    balance_applied: bool = False
    created_at: Optional[datetime] = None

    @property
    def days(self) -> int:
        return days_between_inclusive(self.start_date, self.end_date)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.days,
            "reason": self.reason,
            "status": self.status.value,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "review_comments": self.review_comments,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class LeaveRequestRow:
    """Read-model for approval lists: the request joined with its requester."""

    request: LeaveRequest
    first_name: str
    last_name: str
    employee_id: Optional[str]
    department: Optional[str] = None
    designation: Optional[str] = None

    def to_dict(self) -> dict:
        row = self.request.to_dict()
        row.update(
            {
                "full_name": f"{self.first_name} {self.last_name}".strip(),
                "employee_id": self.employee_id,
                "department": self.department,
                "designation": self.designation,
            }
        )
        return row


@dataclass(frozen=True)
class LeaveBalance:
    """Remaining days per leave type. Counters never go below zero."""

    user_id: str
    paid_leave: int = 0
    sick_leave: int = 0
    casual_leave: int = 0
    unpaid_leave: int = 0

    @classmethod
    def empty(cls, user_id: str) -> "LeaveBalance":
        return cls(user_id=user_id)

    def remaining(self, leave_type: LeaveType) -> int:
        return int(getattr(self, leave_type.balance_field))

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "paid_leave": self.paid_leave,
            "sick_leave": self.sick_leave,
            "casual_leave": self.casual_leave,
            "unpaid_leave": self.unpaid_leave,
        }
