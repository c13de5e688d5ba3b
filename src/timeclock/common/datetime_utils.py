from __future__ import annotations

from datetime import datetime


def now_local() -> datetime:
    """Current local time, truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def seconds_between(start: datetime, end: datetime) -> int:
    return int(round((end - start).total_seconds()))


def format_hours(seconds: int) -> str:
    """Render seconds as HH:MM, blank for zero."""
    if not seconds:
        return ""
    minutes = int(seconds) // 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
