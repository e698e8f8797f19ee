from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.web import arg_month, json_body, login_required, ok, reviewer_required, target_user_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/payroll", methods=["GET"], endpoint="payroll")
    @login_required
    def payroll():
        user_id = target_user_id()
        summary = service.get_payroll(user_id, month=arg_month())
        return ok(
            payroll=summary.to_dict(),
            structure=service.get_structure(user_id).to_dict(),
        )

    @app.route("/payroll/<user_id>/salary", methods=["PUT"], endpoint="payroll_update_salary")
    @reviewer_required
    def update_salary(user_id: str):
        data = json_body()
        effective = data.get("effective_from")
        container.profile_service.get_profile(user_id)
        structure = service.update_salary(
            user_id,
            data,
            effective_from=parse_iso_date(str(effective)) if effective else None,
        )
        return ok(message="Salary structure updated", structure=structure.to_dict())
