from __future__ import annotations

from typing import Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: str, title: str, message: str, type: NotificationType) -> str:
        notification_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(id, user_id, title, message, type, is_read)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (notification_id, user_id, title, message, type.value),
            )
        return notification_id

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        unread = "AND is_read=0" if unread_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, user_id, title, message, type, is_read, created_at
                FROM notifications
                WHERE user_id=%s {unread}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [
                Notification(
                    id=r["id"],
                    user_id=r["user_id"],
                    title=r["title"],
                    message=r["message"],
                    type=NotificationType(r["type"]),
                    is_read=bool(r["is_read"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def count_unread(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM notifications WHERE user_id=%s AND is_read=0", (user_id,))
            return int(fetchone(cur)["n"])

    def mark_read(self, notification_id: str, *, user_id: str) -> bool:
        # rowcount only counts changed rows, so existence is checked separately.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM notifications WHERE id=%s AND user_id=%s",
                (notification_id, user_id),
            )
            if not fetchall(cur):
                return False
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE id=%s AND user_id=%s AND is_read=0",
                (notification_id, user_id),
            )
            return True

    def mark_all_read(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE user_id=%s AND is_read=0", (user_id,))
            return int(cur.rowcount)
