from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    """Repository interface for profiles and their roles.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Profile]:
        """Newest first."""

        raise NotImplementedError

    def create(self, profile: Profile, *, role: Role) -> str:
        raise NotImplementedError

    def update_fields(self, user_id: str, fields: dict) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: str, *, is_active: bool) -> bool:
        raise NotImplementedError

    def get_role(self, user_id: str) -> Optional[Role]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def count_joined_since(self, since: date) -> int:
        raise NotImplementedError
