from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.filters import EmployeeFilter, distinct_departments
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_LEAVE_ALLOCATION
from ..core.enums import Role
from ..core.exceptions import NotFound, ValidationError
from ..database.mysql_base import new_id
from ..leave.repository import LeaveBalanceRepository
from .model import Profile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)

SELF_SERVICE_FIELDS = ("phone", "address", "emergency_contact")
ADMIN_FIELDS = ("department", "designation", "date_of_joining", "phone", "address")


class ProfileService:
    """Use case: employee directory and profile edits."""

    def __init__(
        self,
        profiles: ProfileRepository,
        attendance: AttendanceRepository,
        balances: LeaveBalanceRepository,
        *,
        leave_allocation: Optional[Mapping[str, int]] = None,
    ):
        self._profiles = profiles
        self._attendance = attendance
        self._balances = balances
        self._allocation = dict(leave_allocation or DEFAULT_LEAVE_ALLOCATION)

    def register_employee(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        employee_id: Optional[str] = None,
        role: Role = Role.EMPLOYEE,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        date_of_joining: Optional[date] = None,
    ) -> Profile:
        profile = Profile(
            id=new_id(),
            first_name=require_non_empty(first_name, "First name"),
            last_name=(last_name or "").strip(),
            email=require_non_empty(email, "Email").lower(),
            employee_id=optional_text(employee_id),
            department=optional_text(department),
            designation=optional_text(designation),
            date_of_joining=date_of_joining,
        )
        if "@" not in profile.email:
            raise ValidationError("Email is not valid")

        user_id = self._profiles.create(profile, role=role)
        self._balances.create_for_user(user_id, self._allocation)
        logger.info("Registered employee user=%s role=%s", user_id, role.value)
        return self.get_profile(user_id)

    def get_profile(self, user_id: str) -> Profile:
        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise NotFound("Employee not found")
        return profile

    def get_role(self, user_id: str) -> Role:
        return self._profiles.get_role(user_id) or Role.EMPLOYEE

    def update_own_contact(self, user_id: str, changes: Mapping[str, object]) -> Profile:
        return self._update(user_id, changes, allowed=SELF_SERVICE_FIELDS)

    def admin_update(self, user_id: str, changes: Mapping[str, object]) -> Profile:
        return self._update(user_id, changes, allowed=ADMIN_FIELDS)

    def set_active(self, user_id: str, *, is_active: bool) -> Profile:
        self.get_profile(user_id)
        self._profiles.set_active(user_id, is_active=is_active)
        logger.info("Employee user=%s active=%s", user_id, is_active)
        return self.get_profile(user_id)

    def list_employees(self, employee_filter: EmployeeFilter, *, today: Optional[date] = None) -> list[dict]:
        today = today or now_local().date()
        todays = {r.user_id: r for r in self._attendance.list_for_date(today)}

        out: list[dict] = []
        for p in self._profiles.list_all():
            record = todays.get(p.id)
            if not employee_filter.matches(
                first_name=p.first_name,
                last_name=p.last_name,
                email=p.email,
                employee_id=p.employee_id,
                department=p.department,
                is_active=p.is_active,
                today_status=record.status if record else None,
                has_today_record=record is not None,
            ):
                continue
            row = p.to_dict()
            row["today"] = record.to_dict() if record else None
            out.append(row)
        return out

    def list_departments(self) -> list[str]:
        return distinct_departments(p.department for p in self._profiles.list_all())

    def _update(self, user_id: str, changes: Mapping[str, object], *, allowed: Sequence[str]) -> Profile:
        rejected = sorted(set(changes) - set(allowed))
        if rejected:
            raise ValidationError(f"Fields cannot be changed here: {', '.join(rejected)}")

        fields: dict = {}
        for name in allowed:
            if name not in changes:
                continue
            value = changes[name]
            if name == "date_of_joining":
                if value is not None and not isinstance(value, date):
                    raise ValidationError("date_of_joining must be a date")
                fields[name] = value
            else:
                fields[name] = optional_text(value if value is None else str(value))

        self.get_profile(user_id)
        if fields:
            self._profiles.update_fields(user_id, fields)
        return self.get_profile(user_id)
