from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveBalance, LeaveRequest, LeaveRequestRow


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> str:
        raise NotImplementedError

    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: str,
        status: RequestStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        review_comments: Optional[str] = None,
    ) -> bool:
        """Move a pending request to `status`. False if it was not pending."""

        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequestRow]:
        """Newest first, joined with the requester profile."""

        raise NotImplementedError

    def count_by_status(self, status: RequestStatus) -> int:
        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get_for_user(self, user_id: str) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def create_for_user(self, user_id: str, allocation: Mapping[str, int]) -> None:
        raise NotImplementedError

    def apply_deduction(self, *, request_id: str, user_id: str, leave_type: LeaveType, days: int) -> bool:
        """Deduct `days` (floored at 0) once per approved request.

        Sets the request's `balance_applied` marker in the same transaction.
        Returns False, deducting nothing, when the marker was already set.
        """

        raise NotImplementedError
