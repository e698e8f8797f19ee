from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Profile:
    """Domain entity: one employee profile per user.

    Profiles are never deleted, only deactivated via `is_active`.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    employee_id: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    date_of_joining: Optional[date] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "email": self.email,
            "department": self.department,
            "designation": self.designation,
            "date_of_joining": self.date_of_joining.isoformat() if self.date_of_joining else None,
            "phone": self.phone,
            "address": self.address,
            "emergency_contact": self.emergency_contact,
            "is_active": self.is_active,
        }
