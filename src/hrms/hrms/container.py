from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .leave.mysql_leave_repository import MySQLLeaveBalanceRepository, MySQLLeaveRequestRepository
from .leave.repository import LeaveBalanceRepository, LeaveRequestRepository
from .leave.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.service import PayrollService
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository
from .profiles.service import ProfileService
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    profiles_repo: ProfileRepository
    attendance_repo: AttendanceRepository
    leave_requests_repo: LeaveRequestRepository
    leave_balance_repo: LeaveBalanceRepository
    salary_repo: SalaryRepository
    notifications_repo: NotificationRepository

    notification_service: NotificationService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    profile_service: ProfileService
    report_service: ReportService


def wire_services(
    *,
    profiles_repo: ProfileRepository,
    attendance_repo: AttendanceRepository,
    leave_requests_repo: LeaveRequestRepository,
    leave_balance_repo: LeaveBalanceRepository,
    salary_repo: SalaryRepository,
    notifications_repo: NotificationRepository,
    leave_allocation: Optional[Mapping[str, int]] = None,
) -> Container:
    """Build services over any set of repositories (MySQL in production, fakes in tests)."""
    notification_service = NotificationService(notifications_repo)
    attendance_service = AttendanceService(attendance_repo, strategy_factory=AttendanceStrategyFactory())
    leave_service = LeaveService(leave_requests_repo, leave_balance_repo, attendance_service, notification_service)
    payroll_service = PayrollService(salary_repo, attendance_service, notification_service)
    profile_service = ProfileService(
        profiles_repo,
        attendance_repo,
        leave_balance_repo,
        leave_allocation=leave_allocation,
    )
    report_service = ReportService(attendance_repo, leave_requests_repo, profiles_repo)

    return Container(
        profiles_repo=profiles_repo,
        attendance_repo=attendance_repo,
        leave_requests_repo=leave_requests_repo,
        leave_balance_repo=leave_balance_repo,
        salary_repo=salary_repo,
        notifications_repo=notifications_repo,
        notification_service=notification_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        profile_service=profile_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, leave_allocation: Optional[Mapping[str, int]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        profiles_repo=MySQLProfileRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_requests_repo=MySQLLeaveRequestRepository(conn),
        leave_balance_repo=MySQLLeaveBalanceRepository(conn),
        salary_repo=MySQLSalaryRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        leave_allocation=leave_allocation,
    )
