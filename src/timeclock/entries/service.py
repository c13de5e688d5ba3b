from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import join_notes, require_datetime, require_id
from ..core.constants import NOTE_SEPARATOR
from ..core.enums import EntryType
from ..core.exceptions import NotFoundError, ValidationError, wraps_errors
from ..core.rules import DEFAULT_RULES, ClockRules
from ..pay_periods.repository import PayPeriodRepository
from ..approvals.service import ApprovalService
from .action_log import ActionLog
from .model import Entry, EntryUpdate, NewEntry
from .repository import EntryRepository
from .validation import decorate, requires_approval, session_duration, validate_entries

logger = logging.getLogger(__name__)


class Reconciler(Protocol):
    def reconcile(self, employee_id: int, pay_period_id: int, *, now: Optional[datetime] = None) -> Sequence[Entry]:
        ...


class EntryService:
    """Entry store use cases.

    Every payable change runs the same follow-up steps in order: approval
    reset, then salary reconciliation. Steps are not rolled back if a later
    one fails; each is safe to repeat.
    """

    def __init__(
        self,
        entries: EntryRepository,
        action_log: ActionLog,
        periods: PayPeriodRepository,
        approvals: ApprovalService,
        *,
        rules: ClockRules = DEFAULT_RULES,
        reconciler: Optional[Reconciler] = None,
    ):
        self._entries = entries
        self._action_log = action_log
        self._periods = periods
        self._approvals = approvals
        self._rules = rules
        self._reconciler = reconciler

    def bind_reconciler(self, reconciler: Reconciler) -> None:
        self._reconciler = reconciler

    def _resolve_pay_period_id(self, when: datetime) -> Optional[int]:
        period = self._periods.get_for_date(when)
        if not period:
            logger.warning("no pay period covers %s", when)
            return None
        return period.pay_period_id

    def _after_payable_change(
        self,
        employee_id: int,
        pay_period_id: Optional[int],
        entry_type: EntryType,
        *,
        now: datetime,
        reset_approval: bool = True,
    ) -> None:
        # AUTOMATIC entries are written by the reconciler itself.
        if entry_type == EntryType.AUTOMATIC or not pay_period_id:
            return
        if reset_approval:
            self._approvals.reset(employee_id, pay_period_id)
        if self._reconciler is not None:
            self._reconciler.reconcile(employee_id, pay_period_id, now=now)

    def _load_decorated(self, employee_id: int, entry_ids: Sequence[int]) -> list[Entry]:
        rows = list(self._entries.get_entries(employee_id, entry_ids))
        actions = self._action_log.list_for_entries([e.entry_id for e in rows])
        return [decorate(e, actions) for e in rows]

    @wraps_errors("save_new_entry")
    def create_entry(self, new: NewEntry, *, now: Optional[datetime] = None) -> Optional[Entry]:
        now = now or now_local()
        if not new.employee_id:
            raise ValidationError("Invalid employee")
        employee_id = require_id(new.employee_id, "employee id")
        entry_type = EntryType(new.entry_type)
        entry_date = require_datetime(new.entry_date, "entry date") if new.entry_date else now

        pay_period_id = self._resolve_pay_period_id(entry_date)
        entry_id = self._entries.insert_entry(
            employee_id=employee_id,
            entry_type=entry_type,
            user_id=int(new.user_id or 0),
            entry_date=entry_date,
            duration=int(new.duration or 0),
            note=new.note or "",
            pay_period_id=pay_period_id,
        )
        logger.info("entry %s created (%s) for employee %s", entry_id, entry_type.name, employee_id)

        self._after_payable_change(employee_id, pay_period_id, entry_type, now=now)

        entry = self.load_entry(employee_id, entry_id, now=now)
        if entry is None:
            logger.warning("entry %s not found after insert", entry_id)
        return entry

    @wraps_errors("save_entry")
    def update_entry(self, update: EntryUpdate, *, now: Optional[datetime] = None) -> Optional[Entry]:
        now = now or now_local()
        if not update.entry_id:
            return self.create_entry(
                NewEntry(
                    employee_id=update.employee_id,
                    entry_type=update.entry_type,
                    user_id=update.user_id,
                    entry_date=update.entry_date,
                    duration=update.duration,
                    note=update.note,
                ),
                now=now,
            )

        entry_id = require_id(update.entry_id, "entry id")
        employee_id = require_id(update.employee_id, "employee id")
        if not update.entry_date:
            raise ValidationError("Invalid entry date")
        entry_date = require_datetime(update.entry_date, "entry date")
        entry_type = EntryType(update.entry_type)

        found = self._load_decorated(employee_id, [entry_id])
        if not found:
            raise NotFoundError(f"Entry {entry_id} not found")
        existing = found[0]

        duration = int(update.duration or 0)
        if entry_type == EntryType.TIMECLOCK:
            # Clock sessions get their duration from actions, not from callers.
            duration = existing.duration

        pay_period_id = self._resolve_pay_period_id(entry_date)
        self._entries.update_entry(
            entry_id=entry_id,
            entry_type=entry_type,
            user_id=int(update.user_id or 0),
            entry_date=entry_date,
            duration=duration,
            note=update.note or "",
            pay_period_id=pay_period_id,
        )
        logger.info("entry %s updated for employee %s", entry_id, employee_id)

        changed = duration != existing.duration or requires_approval(existing.entry_type, entry_type, self._rules)
        if existing.has_approval and changed:
            self._after_payable_change(employee_id, existing.pay_period_id, entry_type, now=now)
            if pay_period_id != existing.pay_period_id:
                self._after_payable_change(employee_id, pay_period_id, entry_type, now=now)

        return self.load_entry(employee_id, entry_id, now=now)

    @wraps_errors("sync_clock_duration")
    def sync_clock_duration(self, employee_id: int, entry_id: int, *, now: Optional[datetime] = None) -> None:
        """Store the closed session length of a TIMECLOCK entry from its actions."""
        now = now or now_local()
        found = self._load_decorated(require_id(employee_id, "employee id"), [require_id(entry_id, "entry id")])
        if not found or not found[0].is_timeclock:
            return
        entry = found[0]
        duration = session_duration(entry)
        if duration is None or duration == entry.duration:
            return

        self._entries.update_entry(
            entry_id=entry.entry_id,
            entry_type=entry.entry_type,
            user_id=entry.user_id,
            entry_date=entry.entry_date,
            duration=duration,
            note=entry.note,
            pay_period_id=entry.pay_period_id,
        )
        logger.info("entry %s session closed at %s seconds", entry.entry_id, duration)
        self._after_payable_change(
            entry.employee_id,
            entry.pay_period_id,
            entry.entry_type,
            now=now,
            reset_approval=entry.has_approval,
        )

    @wraps_errors("load_employee_entry")
    def load_entry(self, employee_id: int, entry_id, *, now: Optional[datetime] = None) -> Optional[Entry]:
        if entry_id == 0:
            return None
        entry_id = require_id(entry_id, "entry ID")
        if entry_id == 0:
            return None
        employee_id = require_id(employee_id, "employee id")

        found = self._load_decorated(employee_id, [entry_id])
        if not found:
            return None
        entry = found[0]
        now = now or now_local()

        if entry.pay_period_id is None:
            return validate_entries([entry], now=now, rules=self._rules)[0]
        # Open/closed inference needs the sibling entries of the same period.
        batch = self.load_pay_period_entries(employee_id, entry.pay_period_id, now=now)
        for candidate in batch:
            if candidate.entry_id == entry_id:
                return candidate
        return validate_entries([entry], now=now, rules=self._rules)[0]

    @wraps_errors("load_employee_latest_entry")
    def load_latest_open_entry(
        self,
        employee_id: int,
        entry_type: EntryType = EntryType.TIMECLOCK,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[Entry]:
        now = now or now_local()
        employee_id = require_id(employee_id, "employee id")
        entry_id = self._entries.find_latest_open_entry_id(employee_id, EntryType(entry_type), now=now)
        if not entry_id:
            return None
        return self.load_entry(employee_id, entry_id, now=now)

    @wraps_errors("load_pay_period_entries")
    def load_pay_period_entries(
        self,
        employee_id: int,
        pay_period_id: int,
        *,
        now: Optional[datetime] = None,
    ) -> list[Entry]:
        rows = list(
            self._entries.list_for_pay_period(
                require_id(employee_id, "employee id"),
                require_id(pay_period_id, "pay period id"),
            )
        )
        actions = self._action_log.list_for_entries([e.entry_id for e in rows])
        decorated = [decorate(e, actions) for e in rows]
        return validate_entries(decorated, now=now or now_local(), rules=self._rules)

    @wraps_errors("delete_entry")
    def soft_delete(
        self,
        entry: Entry,
        deleted_by: int,
        comment: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[Entry]:
        now = now or now_local()
        note = join_notes(entry.note, (comment or "").strip(), separator=NOTE_SEPARATOR)
        self._entries.mark_deleted(entry_id=entry.entry_id, deleted_by=int(deleted_by or 0), note=note)
        logger.info("entry %s deleted by %s", entry.entry_id, deleted_by)

        if entry.pay_period_id and self._reconciler is not None:
            self._reconciler.reconcile(entry.employee_id, entry.pay_period_id, now=now)
        return self.load_entry(entry.employee_id, entry.entry_id, now=now)
