from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, user_id: str, title: str, message: str, type: NotificationType) -> str:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def count_unread(self, user_id: str) -> int:
        raise NotImplementedError

    def mark_read(self, notification_id: str, *, user_id: str) -> bool:
        raise NotImplementedError

    def mark_all_read(self, user_id: str) -> int:
        raise NotImplementedError
