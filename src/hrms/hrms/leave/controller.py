from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.filters import parse_request_status
from ..common.web import current_user_id, json_body, login_required, ok, reviewer_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/leave", methods=["POST"], endpoint="leave_submit")
    @login_required
    def submit_leave():
        data = json_body()
        req = service.submit(
            user_id=current_user_id(),
            leave_type=str(data.get("leave_type") or ""),
            start_date=parse_iso_date(str(data.get("start_date") or "")),
            end_date=parse_iso_date(str(data.get("end_date") or "")),
            reason=data.get("reason"),
        )
        return ok(201, message="Leave request submitted. It is pending approval.", request=req.to_dict())

    @app.route("/leave/mine", methods=["GET"], endpoint="leave_mine")
    @login_required
    def my_requests():
        limit = request.args.get("limit", type=int) or 200
        rows = service.list_my_requests(current_user_id(), limit=limit)
        return ok(requests=[r.to_dict() for r in rows])

    @app.route("/leave/balance", methods=["GET"], endpoint="leave_balance")
    @login_required
    def balance():
        return ok(balance=service.get_balance(current_user_id()).to_dict())

    @app.route("/leave/requests", methods=["GET"], endpoint="leave_requests")
    @reviewer_required
    def all_requests():
        status = parse_request_status(request.args.get("status", "pending"))
        rows = service.list_requests(status=status, search=request.args.get("q", ""))
        return ok(
            pending_count=service.pending_count(),
            requests=[r.to_dict() for r in rows],
        )

    @app.route("/leave/<request_id>/approve", methods=["POST"], endpoint="leave_approve")
    @reviewer_required
    def approve(request_id: str):
        req = service.approve(
            request_id,
            reviewer_id=current_user_id(),
            comment=str(json_body().get("comment") or ""),
        )
        return ok(message="Leave approved", request=req.to_dict())

    @app.route("/leave/<request_id>/reject", methods=["POST"], endpoint="leave_reject")
    @reviewer_required
    def reject(request_id: str):
        req = service.reject(
            request_id,
            reviewer_id=current_user_id(),
            comment=str(json_body().get("comment") or ""),
        )
        return ok(message="Leave rejected", request=req.to_dict())

    @app.route("/leave/<request_id>/reconcile", methods=["POST"], endpoint="leave_reconcile")
    @reviewer_required
    def reconcile(request_id: str):
        applied = service.reconcile_approved(request_id)
        return ok(balance_applied_now=applied)
