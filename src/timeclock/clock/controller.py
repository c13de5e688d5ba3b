from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_datetime, require_id
from ..common.web import action_notes, as_flag, current_user_id, json_body, supervisor_required
from ..core.enums import ActionFlag
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # Kiosk routes: the login code is the only credential.
    @app.route("/clock/in", methods=["POST"], endpoint="clock_in")
    def clock_in():
        body = json_body()
        result = container.clock_service.clock_in(
            body.get("login_code"),
            override=as_flag(body.get("override")),
            user_id=current_user_id(),
            ip=request.remote_addr or "",
            notes=action_notes(body),
        )
        return jsonify(result.to_dict())

    @app.route("/clock/out", methods=["POST"], endpoint="clock_out")
    def clock_out():
        body = json_body()
        result = container.clock_service.clock_out(
            body.get("login_code"),
            override=as_flag(body.get("override")),
            entry_id=body.get("entry_id") or None,
            user_id=current_user_id(),
            note=body.get("note") or "",
            ip=request.remote_addr or "",
            notes=action_notes(body),
        )
        return jsonify(result.to_dict())

    @app.route("/employees/<int:employee_id>/entries/<int:entry_id>/adjust", methods=["POST"], endpoint="adjust_clock")
    @supervisor_required
    def adjust_clock(employee_id: int, entry_id: int):
        body = json_body()
        action = body.get("action") or {}
        if "action_type" not in action:
            raise ValidationError("Invalid action type")
        try:
            flags = ActionFlag(require_id(action.get("action_type"), "action type"))
        except ValueError:
            raise ValidationError("Invalid action type")

        employee = container.employee_service.get(employee_id)
        result = container.clock_service.adjust_clock(
            employee.employee_id,
            entry_id,
            flags,
            require_datetime(action.get("time"), "action time"),
            user_id=current_user_id(),
            comment=body.get("comment"),
            ip=request.remote_addr or "",
            notes=action_notes(body),
        )
        return jsonify(result.to_dict())

    @app.route("/employees/<int:employee_id>/entries/<int:entry_id>", methods=["DELETE"], endpoint="delete_entry")
    @supervisor_required
    def delete_entry(employee_id: int, entry_id: int):
        body = json_body()
        employee = container.employee_service.get(employee_id)
        result = container.clock_service.delete_entry(
            employee.employee_id,
            entry_id,
            user_id=current_user_id(),
            comment=body.get("comment"),
            ip=request.remote_addr or "",
            notes=action_notes(body),
        )
        return jsonify(result.to_dict())
