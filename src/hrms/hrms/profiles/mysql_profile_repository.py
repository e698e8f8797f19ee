from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = """
    id, employee_id, first_name, last_name, email, department, designation,
    date_of_joining, phone, address, emergency_contact, is_active, created_at
"""

_UPDATABLE = {
    "employee_id",
    "first_name",
    "last_name",
    "department",
    "designation",
    "date_of_joining",
    "phone",
    "address",
    "emergency_contact",
}


def _to_profile(r: dict) -> Profile:
    return Profile(
        id=r["id"],
        employee_id=r.get("employee_id"),
        first_name=r["first_name"],
        last_name=r.get("last_name") or "",
        email=r["email"],
        department=r.get("department"),
        designation=r.get("designation"),
        date_of_joining=r.get("date_of_joining"),
        phone=r.get("phone"),
        address=r.get("address"),
        emergency_contact=r.get("emergency_contact"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (user_id,))
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Profile]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles {where} ORDER BY created_at DESC")
            return [_to_profile(r) for r in fetchall(cur)]

    def create(self, profile: Profile, *, role: Role) -> str:
        user_id = profile.id or new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(
                    id, employee_id, first_name, last_name, email, department,
                    designation, date_of_joining, phone, address, emergency_contact, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    profile.employee_id,
                    profile.first_name,
                    profile.last_name,
                    profile.email,
                    profile.department,
                    profile.designation,
                    profile.date_of_joining,
                    profile.phone,
                    profile.address,
                    profile.emergency_contact,
                    1 if profile.is_active else 0,
                ),
            )
            cur.execute(
                "INSERT INTO user_roles(id, user_id, role) VALUES(%s,%s,%s)",
                (new_id(), user_id, role.value),
            )
        return user_id

    def update_fields(self, user_id: str, fields: dict) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return False

        names = sorted(fields)
        assignments = ", ".join(f"{name}=%s" for name in names)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE profiles SET {assignments} WHERE id=%s",
                tuple(fields[name] for name in names) + (user_id,),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: str, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE profiles SET is_active=%s WHERE id=%s", (1 if is_active else 0, user_id))
            return cur.rowcount > 0

    def get_role(self, user_id: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return Role(r["role"]) if r else None

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM profiles WHERE is_active=1")
            return int(fetchone(cur)["n"])

    def count_joined_since(self, since: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM profiles WHERE date_of_joining >= %s", (since,))
            return int(fetchone(cur)["n"])
