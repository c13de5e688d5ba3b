from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_id
from ..common.web import as_flag, current_user_id, json_body, supervisor_required
from ..core.enums import EntryType
from ..core.exceptions import ValidationError
from ..entries.model import EntryUpdate
from ..container import Container


def _entry_type(value) -> EntryType:
    try:
        return EntryType(require_id(value, "entry type"))
    except ValueError:
        raise ValidationError("Invalid entry type")


def register(app: Flask, container: Container) -> None:
    @app.route("/employees/code/<login_code>", methods=["POST"], endpoint="employee_by_login_code")
    def employee_by_login_code(login_code: str):
        view = container.payroll_service.employee_current_period(login_code)
        return jsonify(view.to_dict())

    @app.route("/employees", methods=["GET"], endpoint="employee_list")
    @supervisor_required
    def employee_list():
        employees = container.employee_service.list_employees(
            include_inactive=as_flag(request.args.get("include_inactive"))
        )
        return jsonify({"employees": [e.to_dict() for e in employees]})

    @app.route("/employees/id/<int:employee_id>", methods=["GET"], endpoint="employee_detail")
    @supervisor_required
    def employee_detail(employee_id: int):
        view = container.payroll_service.employee_current_period(employee_id=employee_id)
        return jsonify(view.to_dict())

    @app.route("/employees/<int:employee_id>/entries", methods=["POST"], endpoint="save_entry")
    @supervisor_required
    def save_entry(employee_id: int):
        body = json_body()
        employee = container.employee_service.get(employee_id)
        entry = container.entry_service.update_entry(
            EntryUpdate(
                entry_id=require_id(body.get("id") or 0, "entry id"),
                employee_id=employee.employee_id,
                entry_type=_entry_type(body.get("entry_type")),
                user_id=current_user_id(),
                entry_date=body.get("entry_date"),
                duration=require_id(body.get("duration") or 0, "duration"),
                note=body.get("note") or "",
            )
        )
        return jsonify({"entry": entry.to_dict() if entry else None})
