from __future__ import annotations

from datetime import date

import pytest

from hrms.common.filters import EmployeeFilter
from hrms.core.enums import AttendanceStatus, Role
from hrms.core.exceptions import NotFound, ValidationError


@pytest.fixture
def service(container):
    return container.profile_service


@pytest.fixture
def staff(profiles_repo, profile_factory):
    profiles_repo.add(profile_factory("u1", "Asha", "Rao", department="Engineering"))
    profiles_repo.add(profile_factory("u2", "Vikram", "Shah", department="Sales"))
    profiles_repo.add(profile_factory("u3", "Meera", "Iyer", department="Engineering", is_active=False))
    profiles_repo.add(profile_factory("hr1", "Nina", "Das", department="HR"), Role.HR)


def test_register_employee_creates_profile_role_and_balance(service, leave_balance_repo, profiles_repo):
    profile = service.register_employee(
        first_name=" Ravi ",
        last_name="Kumar",
        email="Ravi.Kumar@Example.com",
        employee_id="EMP-100",
        role=Role.HR,
        department="Finance",
        date_of_joining=date(2024, 3, 4),
    )

    assert profile.first_name == "Ravi"
    assert profile.email == "ravi.kumar@example.com"
    assert service.get_role(profile.id) == Role.HR
    balance = leave_balance_repo.get_for_user(profile.id)
    assert (balance.paid_leave, balance.sick_leave, balance.casual_leave, balance.unpaid_leave) == (12, 12, 6, 0)


def test_register_employee_validates_email(service):
    with pytest.raises(ValidationError):
        service.register_employee(first_name="Ravi", last_name="Kumar", email="not-an-email")
    with pytest.raises(ValidationError):
        service.register_employee(first_name="", last_name="Kumar", email="r@example.com")


def test_unknown_role_defaults_to_employee(service):
    assert service.get_role("ghost") == Role.EMPLOYEE


def test_self_service_can_only_touch_contact_fields(service, staff):
    updated = service.update_own_contact("u1", {"phone": " 98765 43210 ", "address": ""})

    assert updated.phone == "98765 43210"
    assert updated.address is None
    with pytest.raises(ValidationError):
        service.update_own_contact("u1", {"department": "Sales"})


def test_admin_update_sets_job_fields(service, staff):
    updated = service.admin_update("u2", {"designation": "Lead", "date_of_joining": date(2023, 1, 2)})

    assert updated.designation == "Lead"
    assert updated.date_of_joining == date(2023, 1, 2)
    with pytest.raises(ValidationError):
        service.admin_update("u2", {"email": "x@example.com"})
    with pytest.raises(NotFound):
        service.admin_update("ghost", {"designation": "Lead"})


def test_deactivate_keeps_profile(service, staff):
    profile = service.set_active("u2", is_active=False)

    assert profile.is_active is False
    assert service.get_profile("u2").full_name == "Vikram Shah"


def test_list_employees_applies_every_filter(service, staff, attendance_repo):
    today = date(2024, 3, 11)
    attendance_repo.add("u1", today, AttendanceStatus.HALF_DAY)
    attendance_repo.add("u2", today, AttendanceStatus.LEAVE)

    def ids(**kwargs):
        return sorted(row["id"] for row in service.list_employees(EmployeeFilter(**kwargs), today=today))

    assert ids() == ["hr1", "u1", "u2", "u3"]
    assert ids(department="Engineering") == ["u1", "u3"]
    assert ids(status="active", department="Engineering") == ["u1"]
    assert ids(attendance="present") == ["u1"]
    assert ids(attendance="absent") == ["hr1", "u3"]
    assert ids(search="das") == ["hr1"]

    [row] = service.list_employees(EmployeeFilter(search="asha"), today=today)
    assert row["today"]["status"] == "half_day"


def test_list_departments(service, staff):
    assert service.list_departments() == ["Engineering", "HR", "Sales"]
