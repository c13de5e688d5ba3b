from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import as_flag, current_user_id, is_supervisor, json_body, supervisor_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/pay-period/<int:pay_period_id>/employee/<int:employee_id>/approve",
        methods=["POST"],
        endpoint="employee_approve",
    )
    def employee_approve(pay_period_id: int, employee_id: int):
        body = json_body()
        employee = container.employee_service.get(employee_id)
        if not is_supervisor():
            # Employees sign off their own time with their login code.
            own = container.employee_service.find_by_login_code(body.get("login_code"))
            if own.employee_id != employee.employee_id:
                return jsonify({"error": "Forbidden"}), 403

        period = container.pay_period_service.get(pay_period_id)
        approved = as_flag(body.get("approved", True))
        updated = container.approval_service.set_employee_approval(employee.employee_id, period.pay_period_id, approved)
        view = container.payroll_service.employee_pay_period(employee.employee_id, period.pay_period_id)
        return jsonify({"updated": updated, **view.to_dict()})

    @app.route(
        "/pay-period/<int:pay_period_id>/employee/<int:employee_id>/supervisor-approve",
        methods=["POST"],
        endpoint="supervisor_approve",
    )
    @supervisor_required
    def supervisor_approve(pay_period_id: int, employee_id: int):
        body = json_body()
        employee = container.employee_service.get(employee_id)
        period = container.pay_period_service.get(pay_period_id)
        approved = as_flag(body.get("approved", True))
        updated = container.approval_service.set_supervisor_approval(
            employee.employee_id,
            period.pay_period_id,
            current_user_id(),
            approved,
        )
        view = container.payroll_service.employee_pay_period(employee.employee_id, period.pay_period_id)
        return jsonify({"updated": updated, **view.to_dict()})
