from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_decimal, db_cursor, fetchall, fetchone, new_id
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "id, user_id, date, check_in, check_out, total_hours, status"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=r["id"],
        user_id=r["user_id"],
        date=r["date"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        total_hours=as_optional_decimal(r.get("total_hours")),
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE user_id=%s AND date=%s",
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_range(self, user_id: str, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s AND date BETWEEN %s AND %s
                ORDER BY date DESC
                """,
                (user_id, start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE date=%s", (work_date,))
            return [_to_record(r) for r in fetchall(cur)]

    def list_between(self, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE date BETWEEN %s AND %s ORDER BY date DESC",
                (start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        user_id: str,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> str:
        record_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance(id, user_id, date, check_in, status) VALUES(%s,%s,%s,%s,%s)",
                (record_id, user_id, work_date, check_in, status.value),
            )
        return record_id

    def update_checkin(self, *, record_id: str, check_in: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET check_in=%s, status=%s WHERE id=%s AND check_in IS NULL",
                (check_in, status.value, record_id),
            )
            return cur.rowcount > 0

    def update_checkout(
        self,
        *,
        record_id: str,
        check_out: datetime,
        total_hours: Decimal,
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out=%s, total_hours=%s, status=%s
                WHERE id=%s AND check_out IS NULL
                """,
                (check_out, total_hours, status.value, record_id),
            )
            return cur.rowcount > 0

    def upsert_status(self, *, user_id: str, work_date: date, status: AttendanceStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(id, user_id, date, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (new_id(), user_id, work_date, status.value),
            )

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["a.date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if user_id is not None:
            clauses.append("a.user_id=%s")
            params.append(user_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.user_id, p.employee_id, p.first_name, p.last_name, p.department,
                       a.date, a.check_in, a.check_out, a.total_hours, a.status
                FROM attendance a
                JOIN profiles p ON p.id = a.user_id
                WHERE {where}
                ORDER BY a.date DESC, p.first_name ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    user_id=r["user_id"],
                    employee_id=r.get("employee_id"),
                    full_name=f"{r['first_name']} {r.get('last_name') or ''}".strip(),
                    department=r.get("department"),
                    date=r["date"],
                    check_in=r.get("check_in"),
                    check_out=r.get("check_out"),
                    total_hours=as_optional_decimal(r.get("total_hours")),
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
