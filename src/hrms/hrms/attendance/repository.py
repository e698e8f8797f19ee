from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_range(self, user_id: str, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Records in [start_date, end_date], newest date first."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """All users' records in the range, newest date first."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: str,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> str:
        raise NotImplementedError

    def update_checkin(self, *, record_id: str, check_in: datetime, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        record_id: str,
        check_out: datetime,
        total_hours: Decimal,
        status: AttendanceStatus,
    ) -> bool:
        raise NotImplementedError

    def upsert_status(self, *, user_id: str, work_date: date, status: AttendanceStatus) -> None:
        """Insert a bare record with `status`, or overwrite only the status of an existing one."""

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
