from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/notifications", methods=["GET"], endpoint="notifications")
    @login_required
    def notifications():
        user_id = current_user_id()
        unread_only = request.args.get("unread") in {"1", "true", "yes"}
        items = service.list_for_user(user_id, unread_only=unread_only, limit=request.args.get("limit", type=int) or 50)
        return ok(
            unread_count=service.unread_count(user_id),
            notifications=[n.to_dict() for n in items],
        )

    @app.route("/notifications/<notification_id>/read", methods=["POST"], endpoint="notification_read")
    @login_required
    def mark_read(notification_id: str):
        service.mark_read(notification_id, user_id=current_user_id())
        return ok()

    @app.route("/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    def mark_all_read():
        updated = service.mark_all_read(current_user_id())
        return ok(message="All notifications marked as read", updated=updated)
