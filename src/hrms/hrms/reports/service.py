from __future__ import annotations

import csv
import io
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, trailing_months
from ..core.constants import DEFAULT_REPORT_MONTHS, UNASSIGNED_DEPARTMENT
from ..core.enums import AttendanceStatus, LeaveType, RequestStatus
from ..core.exceptions import InvalidRange
from ..leave.repository import LeaveRequestRepository
from ..profiles.repository import ProfileRepository

REPORT_CSV_FIELDS = [
    "date",
    "user_id",
    "employee_id",
    "full_name",
    "department",
    "check_in",
    "check_out",
    "total_hours",
    "status",
]


@dataclass(frozen=True)
class DashboardSummary:
    total_employees: int
    present_today: int
    absent_today: int
    pending_leaves: int
    new_hires: int

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "present_today": self.present_today,
            "absent_today": self.absent_today,
            "pending_leaves": self.pending_leaves,
            "new_hires": self.new_hires,
        }


class ReportService:
    """Read-only rollups. Every figure is recomputed from current rows."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        leave_requests: LeaveRequestRepository,
        profiles: ProfileRepository,
    ):
        self._attendance = attendance
        self._leave_requests = leave_requests
        self._profiles = profiles

    def attendance_by_month(self, *, today: date, months: int = DEFAULT_REPORT_MONTHS) -> list[dict]:
        out = []
        for month_start in trailing_months(today, max(int(months), 1)):
            first, last = month_bounds(month_start)
            statuses = Counter(r.status for r in self._attendance.list_between(first, last))
            out.append(
                {
                    "month": first.strftime("%b"),
                    "period": first.strftime("%Y-%m"),
                    "present": statuses[AttendanceStatus.PRESENT],
                    "absent": statuses[AttendanceStatus.ABSENT],
                }
            )
        return out

    def leave_distribution(self) -> dict[str, int]:
        approved = self._leave_requests.list_requests(status=RequestStatus.APPROVED)
        counts = Counter(row.request.leave_type for row in approved)
        return {t.value: counts[t] for t in LeaveType}

    def department_distribution(self) -> dict[str, int]:
        counts = Counter(
            (p.department or "").strip() or UNASSIGNED_DEPARTMENT
            for p in self._profiles.list_all(active_only=True)
        )
        return dict(counts)

    def dashboard_summary(self, *, today: date) -> DashboardSummary:
        """`absent_today` is inferred: active employees minus those present today."""
        total = self._profiles.count_active()
        present = sum(1 for r in self._attendance.list_for_date(today) if r.status == AttendanceStatus.PRESENT)
        first, _ = month_bounds(today)
        return DashboardSummary(
            total_employees=total,
            present_today=present,
            absent_today=max(total - present, 0),
            pending_leaves=self._leave_requests.count_by_status(RequestStatus.PENDING),
            new_hires=self._profiles.count_joined_since(first),
        )

    def attendance_csv(self, *, start: date, end: date, user_id: Optional[str] = None) -> bytes:
        if end < start:
            raise InvalidRange("End date must be on or after start date")

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_CSV_FIELDS)
        writer.writeheader()
        for r in self._attendance.get_report_rows(start_date=start, end_date=end, user_id=user_id):
            writer.writerow(
                {
                    "date": r.date.isoformat(),
                    "user_id": r.user_id,
                    "employee_id": r.employee_id or "",
                    "full_name": r.full_name,
                    "department": r.department or "",
                    "check_in": r.check_in.strftime("%H:%M") if r.check_in else "-",
                    "check_out": r.check_out.strftime("%H:%M") if r.check_out else "-",
                    "total_hours": f"{r.total_hours:.2f}" if r.total_hours is not None else "",
                    "status": r.status.value,
                }
            )
        return out.getvalue().encode("utf-8-sig")
