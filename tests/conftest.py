from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime

import pytest

from hrms.attendance.model import AttendanceRecord, AttendanceReportRow
from hrms.container import wire_services
from hrms.core.enums import AttendanceStatus, RequestStatus, Role
from hrms.leave.model import LeaveBalance, LeaveRequest, LeaveRequestRow
from hrms.notifications.model import Notification
from hrms.profiles.model import Profile

_ids = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


class FakeProfileRepo:
    def __init__(self):
        self.profiles: dict[str, Profile] = {}
        self.roles: dict[str, Role] = {}

    def add(self, profile: Profile, role: Role = Role.EMPLOYEE) -> Profile:
        self.profiles[profile.id] = profile
        self.roles[profile.id] = role
        return profile

    def get_by_id(self, user_id):
        return self.profiles.get(user_id)

    def list_all(self, *, active_only=False):
        rows = [p for p in self.profiles.values() if p.is_active or not active_only]
        return list(reversed(rows))

    def create(self, profile, *, role):
        self.add(profile, role)
        return profile.id

    def update_fields(self, user_id, fields):
        if user_id not in self.profiles:
            return False
        self.profiles[user_id] = replace(self.profiles[user_id], **fields)
        return True

    def set_active(self, user_id, *, is_active):
        return self.update_fields(user_id, {"is_active": is_active})

    def get_role(self, user_id):
        return self.roles.get(user_id)

    def count_active(self):
        return sum(1 for p in self.profiles.values() if p.is_active)

    def count_joined_since(self, since):
        return sum(
            1
            for p in self.profiles.values()
            if p.date_of_joining is not None and p.date_of_joining >= since
        )


class FakeAttendanceRepo:
    def __init__(self, profiles: FakeProfileRepo | None = None):
        self.records: dict[tuple[str, date], AttendanceRecord] = {}
        self._profiles = profiles

    def add(self, user_id, work_date, status, **kwargs) -> AttendanceRecord:
        record = AttendanceRecord(id=_next_id("att"), user_id=user_id, date=work_date, status=status, **kwargs)
        self.records[(user_id, work_date)] = record
        return record

    def get_for_user_and_date(self, user_id, work_date):
        return self.records.get((user_id, work_date))

    def get_range(self, user_id, start_date, end_date):
        rows = [r for (uid, d), r in self.records.items() if uid == user_id and start_date <= d <= end_date]
        return sorted(rows, key=lambda r: r.date, reverse=True)

    def list_for_date(self, work_date):
        return [r for (_, d), r in self.records.items() if d == work_date]

    def list_between(self, start_date, end_date):
        rows = [r for (_, d), r in self.records.items() if start_date <= d <= end_date]
        return sorted(rows, key=lambda r: r.date, reverse=True)

    def create_checkin(self, *, user_id, work_date, check_in, status):
        if (user_id, work_date) in self.records:
            raise RuntimeError("Duplicate entry for (user_id, date)")
        return self.add(user_id, work_date, status, check_in=check_in).id

    def _by_id(self, record_id):
        for key, r in self.records.items():
            if r.id == record_id:
                return key, r
        return None, None

    def update_checkin(self, *, record_id, check_in, status):
        key, r = self._by_id(record_id)
        if r is None:
            return False
        self.records[key] = replace(r, check_in=check_in, status=status)
        return True

    def update_checkout(self, *, record_id, check_out, total_hours, status):
        key, r = self._by_id(record_id)
        if r is None or r.check_out is not None:
            return False
        self.records[key] = replace(r, check_out=check_out, total_hours=total_hours, status=status)
        return True

    def upsert_status(self, *, user_id, work_date, status):
        existing = self.records.get((user_id, work_date))
        if existing:
            self.records[(user_id, work_date)] = replace(existing, status=status)
        else:
            self.add(user_id, work_date, status)

    def get_report_rows(self, *, start_date, end_date, user_id=None):
        out = []
        for r in sorted(self.list_between(start_date, end_date), key=lambda r: (r.date, r.user_id)):
            if user_id and r.user_id != user_id:
                continue
            p = self._profiles.get_by_id(r.user_id) if self._profiles else None
            out.append(
                AttendanceReportRow(
                    user_id=r.user_id,
                    employee_id=p.employee_id if p else None,
                    full_name=p.full_name if p else "",
                    department=p.department if p else None,
                    date=r.date,
                    check_in=r.check_in,
                    check_out=r.check_out,
                    total_hours=r.total_hours,
                    status=r.status,
                )
            )
        return out


class FakeLeaveRequestRepo:
    def __init__(self, profiles: FakeProfileRepo | None = None):
        self.requests: dict[str, LeaveRequest] = {}
        self._profiles = profiles

    def create(self, *, user_id, leave_type, start_date, end_date, reason):
        rid = _next_id("leave")
        self.requests[rid] = LeaveRequest(
            id=rid,
            user_id=user_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            status=RequestStatus.PENDING,
            reason=reason,
            created_at=datetime(2024, 3, 1, 10, 0, 0),
        )
        return rid

    def get_by_id(self, request_id):
        return self.requests.get(request_id)

    def decide(self, *, request_id, status, reviewed_by, reviewed_at, review_comments=None):
        req = self.requests.get(request_id)
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.requests[request_id] = replace(
            req,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_comments=review_comments,
        )
        return True

    def list_requests(self, *, status=None, user_id=None, limit=None):
        rows = []
        for req in reversed(list(self.requests.values())):
            if status is not None and req.status != status:
                continue
            if user_id is not None and req.user_id != user_id:
                continue
            p = self._profiles.get_by_id(req.user_id) if self._profiles else None
            rows.append(
                LeaveRequestRow(
                    request=req,
                    first_name=p.first_name if p else "",
                    last_name=p.last_name if p else "",
                    employee_id=p.employee_id if p else None,
                    department=p.department if p else None,
                    designation=p.designation if p else None,
                )
            )
        return rows[:limit] if limit else rows

    def count_by_status(self, status):
        return sum(1 for r in self.requests.values() if r.status == status)

    def mark_balance_applied(self, request_id):
        self.requests[request_id] = replace(self.requests[request_id], balance_applied=True)


class FakeLeaveBalanceRepo:
    def __init__(self, requests: FakeLeaveRequestRepo):
        self.balances: dict[str, LeaveBalance] = {}
        self._requests = requests

    def set(self, user_id, **counts) -> LeaveBalance:
        self.balances[user_id] = LeaveBalance(user_id=user_id, **counts)
        return self.balances[user_id]

    def get_for_user(self, user_id):
        return self.balances.get(user_id)

    def create_for_user(self, user_id, allocation):
        self.balances[user_id] = LeaveBalance(
            user_id=user_id, **{name: int(days) for name, days in allocation.items()}
        )

    def apply_deduction(self, *, request_id, user_id, leave_type, days):
        req = self._requests.get_by_id(request_id)
        if req is None or req.balance_applied:
            return False
        current = self.balances.get(user_id) or LeaveBalance.empty(user_id)
        field = leave_type.balance_field
        self.balances[user_id] = replace(current, **{field: max(getattr(current, field) - days, 0)})
        self._requests.mark_balance_applied(request_id)
        return True


class FakeSalaryRepo:
    def __init__(self):
        self.structures = {}

    def get_for_user(self, user_id):
        return self.structures.get(user_id)

    def upsert(self, structure):
        self.structures[structure.user_id] = structure


class FakeNotificationRepo:
    def __init__(self):
        self.items: dict[str, Notification] = {}
        self.fail = False

    def create(self, *, user_id, title, message, type):
        if self.fail:
            raise ConnectionError("notification store is down")
        nid = _next_id("notif")
        self.items[nid] = Notification(id=nid, user_id=user_id, title=title, message=message, type=type)
        return nid

    def list_for_user(self, user_id, *, unread_only=False, limit=50):
        rows = [n for n in reversed(list(self.items.values())) if n.user_id == user_id]
        if unread_only:
            rows = [n for n in rows if not n.is_read]
        return rows[:limit]

    def count_unread(self, user_id):
        return sum(1 for n in self.items.values() if n.user_id == user_id and not n.is_read)

    def mark_read(self, notification_id, *, user_id):
        n = self.items.get(notification_id)
        if not n or n.user_id != user_id:
            return False
        self.items[notification_id] = replace(n, is_read=True)
        return True

    def mark_all_read(self, user_id):
        changed = 0
        for nid, n in list(self.items.items()):
            if n.user_id == user_id and not n.is_read:
                self.items[nid] = replace(n, is_read=True)
                changed += 1
        return changed


@pytest.fixture
def fixed_now():
    return datetime(2024, 3, 11, 9, 0, 0)


@pytest.fixture
def profiles_repo():
    return FakeProfileRepo()


@pytest.fixture
def attendance_repo(profiles_repo):
    return FakeAttendanceRepo(profiles_repo)


@pytest.fixture
def leave_requests_repo(profiles_repo):
    return FakeLeaveRequestRepo(profiles_repo)


@pytest.fixture
def leave_balance_repo(leave_requests_repo):
    return FakeLeaveBalanceRepo(leave_requests_repo)


@pytest.fixture
def salary_repo():
    return FakeSalaryRepo()


@pytest.fixture
def notifications_repo():
    return FakeNotificationRepo()


@pytest.fixture
def container(
    profiles_repo,
    attendance_repo,
    leave_requests_repo,
    leave_balance_repo,
    salary_repo,
    notifications_repo,
):
    return wire_services(
        profiles_repo=profiles_repo,
        attendance_repo=attendance_repo,
        leave_requests_repo=leave_requests_repo,
        leave_balance_repo=leave_balance_repo,
        salary_repo=salary_repo,
        notifications_repo=notifications_repo,
    )


def make_profile(user_id: str, first_name: str = "Asha", last_name: str = "Rao", **kwargs) -> Profile:
    kwargs.setdefault("email", f"{first_name.lower()}.{last_name.lower()}@example.com")
    kwargs.setdefault("employee_id", f"EMP-{user_id}")
    return Profile(id=user_id, first_name=first_name, last_name=last_name, **kwargs)


@pytest.fixture
def profile_factory():
    return make_profile
