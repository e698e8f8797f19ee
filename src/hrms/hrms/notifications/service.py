from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..core.exceptions import NotFound
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Side-channel messages to a single user.

    `notify` is fire-and-forget: a failure is logged and never reaches the
    business operation that triggered it.
    """

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        user_id: str,
        *,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
    ) -> Optional[str]:
        try:
            return self._notifications.create(user_id=user_id, title=title, message=message, type=type)
        except Exception:
            logger.exception("Failed to deliver %s notification to user=%s: %s", type.value, user_id, title)
            return None

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id, unread_only=unread_only, limit=limit)

    def unread_count(self, user_id: str) -> int:
        return self._notifications.count_unread(user_id)

    def mark_read(self, notification_id: str, *, user_id: str) -> None:
        if not self._notifications.mark_read(notification_id, user_id=user_id):
            raise NotFound("Notification not found")

    def mark_all_read(self, user_id: str) -> int:
        return self._notifications.mark_all_read(user_id)
