from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.validators import join_notes, require_datetime, require_id
from ..core.constants import (
    ERROR_NOT_CLOCKED_IN,
    NOTE_SEPARATOR,
    WARNING_CLOCK_ENTRY_NOT_FOUND,
    WARNING_CLOCKED_IN,
    WARNING_CLOCKED_OUT,
    WARNING_ENTRY_NOT_FOUND,
)
from ..core.enums import ActionFlag, EntryType
from ..core.exceptions import ClockActionError, NotFoundError, wraps_errors
from ..employees.service import EmployeeService
from ..entries.action_log import ActionLog
from ..entries.model import Entry, EntryUpdate, NewEntry
from ..entries.service import EntryService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockActionResult:
    """Outcome of a clock action.

    ``entry`` is the entry written to; ``existing`` is returned instead when
    the action was refused with a ``warning`` (no exception is raised).
    """

    entry: Optional[Entry] = None
    existing: Optional[Entry] = None
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.entry is not None:
            out["entry"] = self.entry.to_dict()
        if self.existing is not None:
            out["existing"] = self.existing.to_dict()
        if self.warning:
            out["warning"] = self.warning
        return out


def _written(entry: Optional[Entry]) -> ClockActionResult:
    return ClockActionResult(entry=entry, warning=None if entry else WARNING_CLOCK_ENTRY_NOT_FOUND)


class ClockService:
    def __init__(self, employees: EmployeeService, entry_service: EntryService, action_log: ActionLog):
        self._employees = employees
        self._entry_service = entry_service
        self._action_log = action_log

    def _open_session(
        self,
        employee_id: int,
        flags: ActionFlag,
        action_time: datetime,
        *,
        user_id: int,
        note: str,
        ip: str,
        notes: Optional[dict],
        now: datetime,
    ) -> ClockActionResult:
        created = self._entry_service.create_entry(
            NewEntry(
                employee_id=employee_id,
                entry_type=EntryType.TIMECLOCK,
                user_id=user_id,
                entry_date=action_time,
                duration=0,
                note=note,
            ),
            now=now,
        )
        if created is None:
            return _written(None)
        self._action_log.append(created.entry_id, flags, action_time, ip, notes)
        self._entry_service.sync_clock_duration(employee_id, created.entry_id, now=now)
        return _written(self._entry_service.load_entry(employee_id, created.entry_id, now=now))

    @wraps_errors("clock_in")
    def clock_in(
        self,
        login_code: Optional[str],
        *,
        override: bool = False,
        user_id: int = 0,
        entry_date: Optional[datetime] = None,
        ip: str = "",
        notes: Optional[dict] = None,
        now: Optional[datetime] = None,
    ) -> ClockActionResult:
        now = now or now_local()
        action_time = require_datetime(entry_date, "entry date") if entry_date else now
        employee = self._employees.find_by_login_code(login_code)

        existing = self._entry_service.load_latest_open_entry(employee.employee_id, now=now)
        if existing is not None and existing.is_clocked_in and not override:
            return ClockActionResult(existing=existing, warning=WARNING_CLOCKED_IN)

        logger.info("employee %s clocking in", employee.employee_id)
        return self._open_session(
            employee.employee_id,
            ActionFlag.CLOCK_IN,
            action_time,
            user_id=user_id,
            note="",
            ip=ip,
            notes=notes,
            now=now,
        )

    @wraps_errors("clock_out")
    def clock_out(
        self,
        login_code: Optional[str],
        *,
        override: bool = False,
        entry_id: Optional[int] = None,
        user_id: int = 0,
        entry_date: Optional[datetime] = None,
        note: str = "",
        ip: str = "",
        notes: Optional[dict] = None,
        now: Optional[datetime] = None,
    ) -> ClockActionResult:
        now = now or now_local()
        action_time = require_datetime(entry_date, "entry date") if entry_date else now
        employee = self._employees.find_by_login_code(login_code)
        employee_id = employee.employee_id

        if entry_id:
            existing = self._entry_service.load_entry(employee_id, entry_id, now=now)
        else:
            existing = self._entry_service.load_latest_open_entry(employee_id, now=now)

        if existing is None or not existing.is_clocked_in:
            if override:
                logger.info("employee %s clocking out without an open session", employee_id)
                return self._open_session(
                    employee_id,
                    ActionFlag.CLOCK_OUT,
                    action_time,
                    user_id=user_id,
                    note=note,
                    ip=ip,
                    notes=notes,
                    now=now,
                )
            if existing is not None:
                return ClockActionResult(existing=existing, warning=WARNING_CLOCKED_OUT)
            raise ClockActionError(ERROR_NOT_CLOCKED_IN)

        self._action_log.append(existing.entry_id, ActionFlag.CLOCK_OUT, action_time, ip, notes)
        self._entry_service.sync_clock_duration(employee_id, existing.entry_id, now=now)
        logger.info("employee %s clocked out of entry %s", employee_id, existing.entry_id)
        return _written(self._entry_service.load_entry(employee_id, existing.entry_id, now=now))

    @wraps_errors("adjust_clock")
    def adjust_clock(
        self,
        employee_id: int,
        entry_id: Optional[int],
        flags: ActionFlag,
        action_time: datetime,
        *,
        user_id: int = 0,
        comment: Optional[str] = None,
        ip: str = "",
        notes: Optional[dict] = None,
        now: Optional[datetime] = None,
    ) -> ClockActionResult:
        """Supervisor correction: append an action to an entry, or start one.

        An unknown entry is only created when the adjustment carries a
        clock-in bit.
        """
        now = now or now_local()
        employee_id = require_id(employee_id, "employee id")
        flags = flags if isinstance(flags, ActionFlag) else ActionFlag(require_id(flags, "action type"))
        action_time = require_datetime(action_time, "action time")

        existing = self._entry_service.load_entry(employee_id, entry_id or 0, now=now)
        if existing is None:
            if ActionFlag.CLOCK_IN in flags:
                return self._open_session(
                    employee_id,
                    flags,
                    action_time,
                    user_id=user_id,
                    note=comment or "",
                    ip=ip,
                    notes=notes,
                    now=now,
                )
            return ClockActionResult(warning=WARNING_ENTRY_NOT_FOUND)

        if comment:
            self._entry_service.update_entry(
                EntryUpdate.from_entry(existing, note=join_notes(existing.note, comment, separator=NOTE_SEPARATOR)),
                now=now,
            )
        self._action_log.append(existing.entry_id, flags, action_time, ip, notes)
        if flags & (ActionFlag.CLOCK_IN | ActionFlag.CLOCK_OUT):
            self._entry_service.sync_clock_duration(employee_id, existing.entry_id, now=now)
        logger.info("entry %s adjusted by %s (%s)", existing.entry_id, user_id, flags)
        return _written(self._entry_service.load_entry(employee_id, existing.entry_id, now=now))

    @wraps_errors("delete_clock_entry")
    def delete_entry(
        self,
        employee_id: int,
        entry_id: int,
        *,
        user_id: int = 0,
        comment: Optional[str] = None,
        ip: str = "",
        notes: Optional[dict] = None,
        now: Optional[datetime] = None,
    ) -> ClockActionResult:
        now = now or now_local()
        employee_id = require_id(employee_id, "employee id")
        existing = self._entry_service.load_entry(employee_id, require_id(entry_id, "entry id"), now=now)
        if existing is None:
            raise NotFoundError(WARNING_CLOCK_ENTRY_NOT_FOUND)

        self._action_log.append(existing.entry_id, ActionFlag.COMMENT, now, ip, notes)
        entry = self._entry_service.soft_delete(existing, user_id, comment, now=now)
        return _written(entry)
