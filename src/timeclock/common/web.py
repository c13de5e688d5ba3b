from __future__ import annotations

from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.enums import Role

SUPERVISOR_ROLES = {Role.ADMIN.value, Role.SUPERVISOR.value}
ADMIN_ROLES = {Role.ADMIN.value}


def _forbidden():
    return jsonify({"error": "Forbidden"}), 403


def roles_required(roles: set[str]):
    """Gate a view on ``session["role"]``; the session is populated upstream."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if session.get("role") not in roles:
                return _forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator


supervisor_required = roles_required(SUPERVISOR_ROLES)
admin_required = roles_required(ADMIN_ROLES)


def is_supervisor() -> bool:
    return session.get("role") in SUPERVISOR_ROLES


def current_user_id() -> int:
    try:
        return int(session.get("user_id") or 0)
    except (TypeError, ValueError):
        return 0


def json_body() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


def as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def action_notes(body: dict[str, Any]) -> dict[str, Any]:
    """Request context stored alongside an appended action."""
    return {"url": request.path, "body": body}
