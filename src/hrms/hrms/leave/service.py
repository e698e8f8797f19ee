from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import enumerate_dates, now_local
from ..common.filters import EmployeeFilter
from ..common.validators import optional_text
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveType, NotificationType, RequestStatus
from ..core.exceptions import AlreadyReviewed, InvalidRange, NotFound, ValidationError
from ..notifications.service import NotificationService
from .model import LeaveBalance, LeaveRequest, LeaveRequestRow
from .repository import LeaveBalanceRepository, LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave request lifecycle: pending -> approved | rejected.

    Approval is applied as an ordered sequence rather than one transaction:
    mark approved, mark each day as leave (idempotent upserts), deduct the
    balance once (guarded by the request's `balance_applied` marker), then
    notify (best effort). A run interrupted after the first step is finished
    by `reconcile_approved`.
    """

    def __init__(
        self,
        requests: LeaveRequestRepository,
        balances: LeaveBalanceRepository,
        attendance: AttendanceService,
        notifications: NotificationService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._balances = balances
        self._attendance = attendance
        self._notifications = notifications
        self._clock = clock

    def submit(
        self,
        *,
        user_id: str,
        leave_type: LeaveType | str,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        """Always created as pending. The balance is not checked here."""
        if end_date < start_date:
            raise InvalidRange("End date must be on or after start date")
        try:
            leave_type = LeaveType(leave_type)
        except ValueError:
            raise ValidationError(f"Unknown leave type: {leave_type!r}")

        request_id = self._requests.create(
            user_id=user_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=optional_text(reason),
        )
        logger.info(
            "Leave submitted id=%s user=%s type=%s %s..%s",
            request_id,
            user_id,
            leave_type.value,
            start_date,
            end_date,
        )
        return self._get(request_id)

    def approve(self, request_id: str, *, reviewer_id: str, comment: str = "") -> LeaveRequest:
        req = self._decide(request_id, RequestStatus.APPROVED, reviewer_id=reviewer_id, comment=comment)
        self._apply_approval_effects(req)
        self._notifications.notify(
            req.user_id,
            title="Leave Approved",
            message=(
                f"Your {req.leave_type.value} leave from {req.start_date.isoformat()} "
                f"to {req.end_date.isoformat()} has been approved."
            ),
            type=NotificationType.SUCCESS,
        )
        return self._get(request_id)

    def reject(self, request_id: str, *, reviewer_id: str, comment: str = "") -> LeaveRequest:
        req = self._decide(request_id, RequestStatus.REJECTED, reviewer_id=reviewer_id, comment=comment)
        message = (
            f"Your {req.leave_type.value} leave from {req.start_date.isoformat()} "
            f"to {req.end_date.isoformat()} has been rejected."
        )
        if req.review_comments:
            message += f" Comment: {req.review_comments}"
        self._notifications.notify(
            req.user_id,
            title="Leave Rejected",
            message=message,
            type=NotificationType.ERROR,
        )
        return req

    def reconcile_approved(self, request_id: str) -> bool:
        """Re-apply the side effects of an approved request.

        Safe to repeat. Returns True when the balance deduction was applied by
        this call, False when it had already been applied earlier.
        """
        req = self._get(request_id)
        if req.status != RequestStatus.APPROVED:
            raise ValidationError("Only approved requests can be reconciled")
        return self._apply_approval_effects(req)

    def get_balance(self, user_id: str) -> LeaveBalance:
        return self._balances.get_for_user(user_id) or LeaveBalance.empty(user_id)

    def get_request(self, request_id: str) -> LeaveRequest:
        return self._get(request_id)

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        search: str = "",
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequestRow]:
        rows = self._requests.list_requests(status=status, limit=None)
        predicate = EmployeeFilter(search=search)
        matched = [
            row
            for row in rows
            if predicate.matches(
                first_name=row.first_name,
                last_name=row.last_name,
                email=None,
                employee_id=row.employee_id,
            )
        ]
        return matched[:limit]

    def list_my_requests(self, user_id: str, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequestRow]:
        return self._requests.list_requests(user_id=user_id, limit=limit)

    def pending_count(self) -> int:
        return self._requests.count_by_status(RequestStatus.PENDING)

    def _get(self, request_id: str) -> LeaveRequest:
        req = self._requests.get_by_id(request_id)
        if not req:
            raise NotFound("Leave request not found")
        return req

    def _decide(self, request_id: str, status: RequestStatus, *, reviewer_id: str, comment: str) -> LeaveRequest:
        req = self._get(request_id)
        if req.status.is_terminal:
            raise AlreadyReviewed(f"Leave request is already {req.status.value}")

        ok = self._requests.decide(
            request_id=request_id,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=self._clock(),
            review_comments=optional_text(comment),
        )
        if not ok:
            # Lost a race with another reviewer.
            raise AlreadyReviewed("Leave request has already been reviewed")

        logger.info("Leave %s id=%s by=%s", status.value, request_id, reviewer_id)
        return self._get(request_id)

    def _apply_approval_effects(self, req: LeaveRequest) -> bool:
        for day in enumerate_dates(req.start_date, req.end_date):
            self._attendance.mark_as_leave(req.user_id, day)

        if req.balance_applied:
            return False

        days = req.days
        remaining = self.get_balance(req.user_id).remaining(req.leave_type)
        applied = self._balances.apply_deduction(
            request_id=req.id,
            user_id=req.user_id,
            leave_type=req.leave_type,
            days=days,
        )
        if applied:
            if days > remaining:
                logger.warning(
                    "Leave id=%s needs %d %s day(s) but only %d remain; balance clamped to 0",
                    req.id,
                    days,
                    req.leave_type.value,
                    remaining,
                )
            logger.info("Deducted %d %s day(s) for user=%s (request %s)", days, req.leave_type.value, req.user_id, req.id)
        return applied
