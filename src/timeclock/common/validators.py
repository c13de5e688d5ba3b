from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..core.exceptions import ValidationError


def require_id(value: Any, field_name: str) -> int:
    """Coerce a numeric id, rejecting missing and non-numeric values."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid {field_name}")


def require_datetime(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"Invalid {field_name}")


def join_notes(*notes: str | None, separator: str = ";") -> str:
    return separator.join(n for n in notes if n)
