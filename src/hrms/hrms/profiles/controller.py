from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.filters import ALL, EmployeeFilter
from ..common.web import current_user_id, json_body, login_required, ok, reviewer_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def _with_date_of_joining(data: dict) -> dict:
    changes = dict(data)
    if changes.get("date_of_joining"):
        changes["date_of_joining"] = parse_iso_date(str(changes["date_of_joining"]))
    elif "date_of_joining" in changes:
        changes["date_of_joining"] = None
    return changes


def register(app: Flask, container: Container) -> None:
    service = container.profile_service

    @app.route("/profile", methods=["GET"], endpoint="profile")
    @login_required
    def profile():
        user_id = current_user_id()
        return ok(
            profile=service.get_profile(user_id).to_dict(),
            role=service.get_role(user_id).value,
            salary=container.payroll_service.get_structure(user_id).to_dict(),
        )

    @app.route("/profile", methods=["PATCH"], endpoint="profile_update")
    @login_required
    def update_profile():
        updated = service.update_own_contact(current_user_id(), json_body())
        return ok(message="Profile updated", profile=updated.to_dict())

    @app.route("/employees", methods=["GET"], endpoint="employees")
    @reviewer_required
    def employees():
        employee_filter = EmployeeFilter(
            search=request.args.get("q", ""),
            department=request.args.get("department", ALL),
            status=request.args.get("status", ALL),
            attendance=request.args.get("attendance", ALL),
        )
        return ok(
            departments=service.list_departments(),
            employees=service.list_employees(employee_filter),
        )

    @app.route("/employees", methods=["POST"], endpoint="employees_create")
    @reviewer_required
    def create_employee():
        data = json_body()
        try:
            role = Role(data.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Unknown role")
        joined = data.get("date_of_joining")
        created = service.register_employee(
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            email=str(data.get("email") or ""),
            employee_id=data.get("employee_id"),
            role=role,
            department=data.get("department"),
            designation=data.get("designation"),
            date_of_joining=parse_iso_date(str(joined)) if joined else None,
        )
        return ok(201, message="Employee created", profile=created.to_dict())

    @app.route("/employees/<user_id>", methods=["PATCH"], endpoint="employees_update")
    @reviewer_required
    def update_employee(user_id: str):
        updated = service.admin_update(user_id, _with_date_of_joining(json_body()))
        return ok(message="Employee updated", profile=updated.to_dict())

    @app.route("/employees/<user_id>/active", methods=["POST"], endpoint="employees_set_active")
    @reviewer_required
    def set_active(user_id: str):
        is_active = json_body().get("is_active")
        if not isinstance(is_active, bool):
            raise ValidationError("is_active must be true or false")
        updated = service.set_active(user_id, is_active=is_active)
        return ok(message="Status updated", profile=updated.to_dict())
