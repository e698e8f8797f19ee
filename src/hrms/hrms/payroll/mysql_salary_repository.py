from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone, new_id
from .model import DEDUCTION_FIELDS, EARNING_FIELDS, SalaryStructure
from .repository import SalaryRepository

_AMOUNT_FIELDS = EARNING_FIELDS + DEDUCTION_FIELDS


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user(self, user_id: str) -> Optional[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT user_id, {', '.join(_AMOUNT_FIELDS)}, effective_from FROM salary_structure WHERE user_id=%s",
                (user_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            amounts = {name: as_decimal(r.get(name)) for name in _AMOUNT_FIELDS}
            return SalaryStructure(user_id=r["user_id"], effective_from=r.get("effective_from"), **amounts)

    def upsert(self, structure: SalaryStructure) -> None:
        columns = ("id", "user_id") + _AMOUNT_FIELDS + ("effective_from",)
        placeholders = ",".join(["%s"] * len(columns))
        updates = ", ".join(f"{c}=VALUES({c})" for c in _AMOUNT_FIELDS + ("effective_from",))
        values = (
            (new_id(), structure.user_id)
            + tuple(getattr(structure, name) for name in _AMOUNT_FIELDS)
            + (structure.effective_from,)
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO salary_structure({', '.join(columns)})
                VALUES({placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                values,
            )
