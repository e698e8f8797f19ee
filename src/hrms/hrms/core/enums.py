from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for authorization at the HTTP layer."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"

    @property
    def is_reviewer(self) -> bool:
        return self in (Role.ADMIN, Role.HR)


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the `attendance` table."""

    PRESENT = "present"
    HALF_DAY = "half_day"
    ABSENT = "absent"
    LEAVE = "leave"


class LeaveType(str, Enum):
    PAID = "paid"
    SICK = "sick"
    CASUAL = "casual"
    UNPAID = "unpaid"

    @property
    def balance_field(self) -> str:
        """Name of the matching counter on LeaveBalance (e.g. `sick_leave`)."""
        return f"{self.value}_leave"


class RequestStatus(str, Enum):
    """Leave request review state. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self != RequestStatus.PENDING


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
