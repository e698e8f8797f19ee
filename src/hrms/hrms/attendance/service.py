from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateCheckIn, InvalidRange, NoActiveCheckIn, ValidationError
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .stats import AttendanceStats, summarize, worked_hours

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.HALF_DAY: "Half Day",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.LEAVE: "On Leave",
}


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def check_in(
        self,
        user_id: str,
        *,
        work_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        work_date = work_date or now.date()
        if work_date > now.date():
            raise ValidationError("Cannot check in for a future date")

        existing = self._attendance.get_for_user_and_date(user_id, work_date)
        if existing and existing.check_in is not None:
            raise DuplicateCheckIn("You have already checked in today")
        if existing and existing.status == AttendanceStatus.LEAVE:
            raise ValidationError("You are on approved leave today")

        decision = self._factory.for_checkin().decide_checkin()
        if existing:
            # A bare record without a check-in already owns this date.
            self._attendance.update_checkin(record_id=existing.id, check_in=now, status=decision.status)
        else:
            self._attendance.create_checkin(
                user_id=user_id,
                work_date=work_date,
                check_in=now,
                status=decision.status,
            )

        logger.info("Check-in user=%s date=%s at=%s", user_id, work_date, now.isoformat())
        return self._reload(user_id, work_date)

    def check_out(
        self,
        user_id: str,
        *,
        work_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        work_date = work_date or now.date()

        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if not record or not record.is_open:
            raise NoActiveCheckIn("No active check-in found for today")

        hours = worked_hours(record.check_in, now)
        decision = self._factory.for_checkout(total_hours=hours).decide_checkout(total_hours=hours)
        # Leave approved after check-in keeps the day as leave.
        status = AttendanceStatus.LEAVE if record.status == AttendanceStatus.LEAVE else decision.status

        ok = self._attendance.update_checkout(
            record_id=record.id,
            check_out=now,
            total_hours=hours,
            status=status,
        )
        if not ok:
            # Another check-out landed between the read and the write.
            raise NoActiveCheckIn("No active check-in found for today")

        logger.info("Check-out user=%s date=%s hours=%s status=%s", user_id, work_date, hours, status.value)
        return self._reload(user_id, work_date)

    def mark_as_leave(self, user_id: str, work_date: date) -> None:
        """Idempotent upsert: only the status is touched on an existing record."""
        self._attendance.upsert_status(user_id=user_id, work_date=work_date, status=AttendanceStatus.LEAVE)

    def get_range(self, user_id: str, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        if end_date < start_date:
            raise InvalidRange("End date must be on or after start date")
        return self._attendance.get_range(user_id, start_date, end_date)

    def get_today(self, user_id: str, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, today or now_local().date())

    def monthly_stats(self, user_id: str, month_ref: date) -> AttendanceStats:
        first, last = month_bounds(month_ref)
        return summarize(self._attendance.get_range(user_id, first, last))

    def get_history_ui(self, user_id: str, *, today: Optional[date] = None, limit: int = DEFAULT_HISTORY_LIMIT):
        today = today or now_local().date()
        first, _ = month_bounds(today)
        rows = self._attendance.get_range(user_id, first, today)
        return [self._to_ui(r) for r in rows[:limit]]

    def _reload(self, user_id: str, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if record is None:
            raise ValidationError("Attendance record could not be saved")
        return record

    def _to_ui(self, r: AttendanceRecord) -> dict:
        row = r.to_dict()
        row["check_in"] = r.check_in.strftime("%H:%M:%S") if r.check_in else "-"
        row["check_out"] = r.check_out.strftime("%H:%M:%S") if r.check_out else "-"
        row["label"] = STATUS_LABELS.get(r.status, r.status.value)
        return row
