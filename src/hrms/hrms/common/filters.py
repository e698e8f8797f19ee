from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.enums import AttendanceStatus, RequestStatus
from ..core.exceptions import ValidationError

ALL = "all"


def matches_search(query: Optional[str], *fields: Optional[str]) -> bool:
    """Case-insensitive substring match against any of the given fields."""
    q = (query or "").strip().lower()
    if not q:
        return True
    return any(q in (f or "").lower() for f in fields)


@dataclass(frozen=True)
class EmployeeFilter:
    """One predicate shared by the employee directory and the approvals list.

    `attendance` is evaluated against today's record for the employee:
    `present` matches present or half-day, `absent` matches no record at all.
    """

    search: str = ""
    department: str = ALL
    status: str = ALL
    attendance: str = ALL

    def matches(
        self,
        *,
        first_name: Optional[str],
        last_name: Optional[str],
        email: Optional[str],
        employee_id: Optional[str],
        department: Optional[str] = None,
        is_active: bool = True,
        today_status: Optional[AttendanceStatus] = None,
        has_today_record: bool = False,
    ) -> bool:
        if not matches_search(self.search, first_name, last_name, email, employee_id):
            return False
        if self.department != ALL and department != self.department:
            return False
        if self.status == "active" and not is_active:
            return False
        if self.status == "inactive" and is_active:
            return False
        if self.attendance == "present" and today_status not in (AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY):
            return False
        if self.attendance == "absent" and has_today_record:
            return False
        return True


def parse_request_status(value: Optional[str]) -> Optional[RequestStatus]:
    """`all` (or empty) means no status filter."""
    v = (value or "").strip().lower()
    if not v or v == ALL:
        return None
    try:
        return RequestStatus(v)
    except ValueError:
        raise ValidationError(f"Unknown request status: {value!r}")


def distinct_departments(values: Iterable[Optional[str]]) -> list[str]:
    return sorted({v for v in values if v})
