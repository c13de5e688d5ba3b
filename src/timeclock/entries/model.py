from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import ActionFlag, EntryType


@dataclass(frozen=True)
class EntryAction:
    """Immutable clock event appended to an entry's history."""

    action_id: int
    entry_id: int
    flags: ActionFlag
    action_time: datetime
    ip: str = ""
    notes: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @property
    def is_clock_in(self) -> bool:
        return ActionFlag.CLOCK_IN in self.flags

    @property
    def is_clock_out(self) -> bool:
        return ActionFlag.CLOCK_OUT in self.flags

    @property
    def is_adjustment(self) -> bool:
        return ActionFlag.ADJUSTMENT in self.flags


@dataclass(frozen=True)
class Entry:
    """One unit of recorded time.

    ``actions``, ``is_clocked_in`` and ``errors`` are read-side decorations;
    they are rebuilt on every load and never persisted.
    """

    entry_id: int
    employee_id: int
    entry_type: EntryType
    user_id: int
    entry_date: datetime
    duration: int
    note: str = ""
    employee_approved: bool = False
    employee_approval_time: Optional[datetime] = None
    approved: bool = False
    approval_time: Optional[datetime] = None
    approved_by: Optional[int] = None
    deleted: bool = False
    deleted_by: Optional[int] = None
    pay_period_id: Optional[int] = None
    week: int = 0
    created_at: Optional[datetime] = None
    actions: tuple[EntryAction, ...] = ()
    is_clocked_in: bool = False
    errors: tuple[str, ...] = ()

    @property
    def is_timeclock(self) -> bool:
        return self.entry_type == EntryType.TIMECLOCK

    @property
    def is_automatic(self) -> bool:
        return self.entry_type == EntryType.AUTOMATIC

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_approval(self) -> bool:
        return self.approved or self.employee_approved

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "employee_id": self.employee_id,
            "entry_type": int(self.entry_type),
            "entry_type_description": self.entry_type.description,
            "user_id": self.user_id,
            "entry_date": self.entry_date.isoformat(),
            "duration": self.duration,
            "note": self.note,
            "employee_approved": self.employee_approved,
            "employee_approval_time": _iso(self.employee_approval_time),
            "approved": self.approved,
            "approval_time": _iso(self.approval_time),
            "approved_by": self.approved_by,
            "deleted": self.deleted,
            "deleted_by": self.deleted_by,
            "pay_period_id": self.pay_period_id,
            "week": self.week,
            "is_clocked_in": self.is_clocked_in,
            "errors": list(self.errors),
            "actions": [
                {
                    "id": a.action_id,
                    "entry_id": a.entry_id,
                    "action_type": a.flags.value,
                    "time": a.action_time.isoformat(),
                    "ip": a.ip,
                    "notes": a.notes,
                }
                for a in self.actions
            ],
        }


@dataclass(frozen=True)
class NewEntry:
    employee_id: int
    entry_type: EntryType
    user_id: int = 0
    entry_date: Optional[datetime] = None
    duration: int = 0
    note: str = ""


@dataclass(frozen=True)
class EntryUpdate:
    """Caller-supplied state for an existing entry (``entry_id`` 0 means create)."""

    entry_id: int
    employee_id: int
    entry_type: EntryType
    user_id: int
    entry_date: Optional[datetime]
    duration: int
    note: str = ""

    @classmethod
    def from_entry(cls, entry: Entry, **changes) -> "EntryUpdate":
        values = dict(
            entry_id=entry.entry_id,
            employee_id=entry.employee_id,
            entry_type=entry.entry_type,
            user_id=entry.user_id,
            entry_date=entry.entry_date,
            duration=entry.duration,
            note=entry.note,
        )
        values.update(changes)
        return cls(**values)


@dataclass
class WeekTotal:
    """Derived totals for one half of a pay period. Computed on read only."""

    duration: int = 0
    overtime: int = 0
    personal_leave_duration: int = 0
    has_errors: bool = False
    employee_approved: bool = True
    employee_approval_time: Optional[datetime] = None
    approved: bool = True
    approval_time: Optional[datetime] = None
    approved_by: Optional[int] = None
    is_clocked_in: bool = False

    def to_dict(self) -> dict:
        return {
            "duration": self.duration,
            "overtime": self.overtime,
            "personal_leave_duration": self.personal_leave_duration,
            "has_errors": self.has_errors,
            "employee_approved": self.employee_approved,
            "employee_approval_time": _iso(self.employee_approval_time),
            "approved": self.approved,
            "approval_time": _iso(self.approval_time),
            "approved_by": self.approved_by,
            "is_clocked_in": self.is_clocked_in,
        }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
