from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import LeaveBalance, LeaveRequest, LeaveRequestRow
from .repository import LeaveBalanceRepository, LeaveRequestRepository

_REQUEST_COLUMNS = """
    r.id, r.user_id, r.leave_type, r.start_date, r.end_date, r.reason, r.status,
    r.reviewed_by, r.reviewed_at, r.review_comments, r.balance_applied, r.created_at
"""

_BALANCE_FIELDS = {t: t.balance_field for t in LeaveType}


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        id=r["id"],
        user_id=r["user_id"],
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason"),
        status=RequestStatus(r["status"]),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        review_comments=r.get("review_comments"),
        balance_applied=bool(r.get("balance_applied")),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> str:
        request_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(id, user_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request_id,
                    user_id,
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
        return request_id

    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests r WHERE r.id=%s", (request_id,))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def decide(
        self,
        *,
        request_id: str,
        status: RequestStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        review_comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_comments=%s
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    reviewed_by,
                    reviewed_at,
                    review_comments,
                    request_id,
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequestRow]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("r.user_id=%s")
            params.append(user_id)

        where = " AND ".join(clauses)
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS},
                       p.first_name, p.last_name, p.employee_id, p.department, p.designation
                FROM leave_requests r
                JOIN profiles p ON p.id = r.user_id
                WHERE {where}
                ORDER BY r.created_at DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [
                LeaveRequestRow(
                    request=_to_request(r),
                    first_name=r["first_name"],
                    last_name=r.get("last_name") or "",
                    employee_id=r.get("employee_id"),
                    department=r.get("department"),
                    designation=r.get("designation"),
                )
                for r in fetchall(cur)
            ]

    def count_by_status(self, status: RequestStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM leave_requests WHERE status=%s", (status.value,))
            return int(fetchone(cur)["n"])


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user(self, user_id: str) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, paid_leave, sick_leave, casual_leave, unpaid_leave
                FROM leave_balance
                WHERE user_id=%s
                """,
                (user_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveBalance(
                user_id=r["user_id"],
                paid_leave=int(r.get("paid_leave") or 0),
                sick_leave=int(r.get("sick_leave") or 0),
                casual_leave=int(r.get("casual_leave") or 0),
                unpaid_leave=int(r.get("unpaid_leave") or 0),
            )

    def create_for_user(self, user_id: str, allocation: Mapping[str, int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_balance(id, user_id, paid_leave, sick_leave, casual_leave, unpaid_leave)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE user_id=user_id
                """,
                (
                    new_id(),
                    user_id,
                    int(allocation.get("paid_leave", 0)),
                    int(allocation.get("sick_leave", 0)),
                    int(allocation.get("casual_leave", 0)),
                    int(allocation.get("unpaid_leave", 0)),
                ),
            )

    def apply_deduction(self, *, request_id: str, user_id: str, leave_type: LeaveType, days: int) -> bool:
        column = _BALANCE_FIELDS[leave_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET balance_applied=1
                WHERE id=%s AND status=%s AND balance_applied=0
                """,
                (request_id, RequestStatus.APPROVED.value),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(
                f"UPDATE leave_balance SET {column}=GREATEST({column} - %s, 0) WHERE user_id=%s",
                (int(days), user_id),
            )
            return True
