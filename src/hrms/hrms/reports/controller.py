from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_bounds, now_local
from ..common.web import arg_date, ok, reviewer_required
from ..container import Container
from ..core.constants import DEFAULT_REPORT_MONTHS


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/reports/attendance", methods=["GET"], endpoint="report_attendance")
    @reviewer_required
    def attendance_by_month():
        months = request.args.get("months", type=int) or DEFAULT_REPORT_MONTHS
        return ok(months=service.attendance_by_month(today=now_local().date(), months=months))

    @app.route("/reports/leave-distribution", methods=["GET"], endpoint="report_leave_distribution")
    @reviewer_required
    def leave_distribution():
        return ok(distribution=service.leave_distribution())

    @app.route("/reports/departments", methods=["GET"], endpoint="report_departments")
    @reviewer_required
    def departments():
        return ok(distribution=service.department_distribution())

    @app.route("/reports/dashboard", methods=["GET"], endpoint="report_dashboard")
    @reviewer_required
    def dashboard():
        return ok(summary=service.dashboard_summary(today=now_local().date()).to_dict())

    @app.route("/reports/attendance.csv", methods=["GET"], endpoint="report_attendance_csv")
    @reviewer_required
    def attendance_csv():
        first, last = month_bounds(now_local().date())
        start = arg_date("start", first)
        end = arg_date("end", last)
        csv_bytes = service.attendance_csv(start=start, end=end, user_id=request.args.get("user_id") or None)
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_{start}_{end}.csv"},
        )
