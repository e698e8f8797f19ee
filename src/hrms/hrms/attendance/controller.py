from __future__ import annotations

from datetime import date

from flask import Flask

from ..common.datetime_utils import month_bounds, now_local, working_days_in_month
from ..common.web import arg_date, arg_month, current_user_id, login_required, ok, target_user_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        record = service.check_in(current_user_id())
        return ok(201, message="Checked in", record=record.to_dict())

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        record = service.check_out(current_user_id())
        return ok(message="Checked out", record=record.to_dict())

    @app.route("/attendance", methods=["GET"], endpoint="attendance_range")
    @login_required
    def attendance_range():
        user_id = target_user_id()
        today = now_local().date()
        first, last = month_bounds(today)
        start = arg_date("start", first)
        end = arg_date("end", last)
        records = service.get_range(user_id, start, end)
        return ok(user_id=user_id, records=[r.to_dict() for r in records])

    @app.route("/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @login_required
    def attendance_stats():
        user_id = target_user_id()
        month: date = arg_month() or now_local().date()
        stats = service.monthly_stats(user_id, month)
        working_days = working_days_in_month(month)
        return ok(
            user_id=user_id,
            month=month.strftime("%Y-%m"),
            working_days=working_days,
            inferred_absent=stats.inferred_absent_days(working_days),
            stats=stats.to_dict(),
        )
