from __future__ import annotations

from typing import Optional, Protocol

from .model import SalaryStructure


class SalaryRepository(Protocol):
    def get_for_user(self, user_id: str) -> Optional[SalaryStructure]:
        raise NotImplementedError

    def upsert(self, structure: SalaryStructure) -> None:
        """Replace the user's structure. No history is kept."""

        raise NotImplementedError
