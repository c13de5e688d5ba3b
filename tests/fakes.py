"""In-memory repositories shared by the service and route tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Optional, Sequence

from timeclock.core.enums import ActionFlag, EmployeeStatus, EntryType, PayMethod
from timeclock.employees.model import Employee, EmployeeFilter
from timeclock.entries.model import Entry, EntryAction
from timeclock.pay_periods.model import PayPeriod

API_USER_ID = 99


def make_employee(employee_id: int, *, login_code: Optional[str] = None, salaried: bool = False, **changes) -> Employee:
    values = dict(
        employee_id=employee_id,
        login_code=login_code if login_code is not None else f"{employee_id}00{employee_id}",
        department="PROD",
        employee_number=str(100 + employee_id),
        first_name=f"First{employee_id}",
        last_name=f"Last{employee_id}",
        status=EmployeeStatus.ACTIVE,
        pay_method=PayMethod.SALARIED if salaried else PayMethod.HOURLY,
    )
    values.update(changes)
    return Employee(**values)


class InMemoryEmployees:
    def __init__(self, employees: Sequence[Employee] = ()):
        self.by_id: dict[int, Employee] = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self.by_id[employee.employee_id] = employee
        return employee

    def lookup(self, criteria: EmployeeFilter) -> Sequence[Employee]:
        items = sorted(self.by_id.values(), key=lambda e: (e.first_name, e.last_name, e.employee_number))
        if criteria.login_code is not None:
            return [e for e in items if e.login_code == criteria.login_code and e.is_active]
        if criteria.employee_id is not None:
            return [e for e in items if e.employee_id == int(criteria.employee_id)]
        if criteria.department is not None and criteria.employee_number is not None:
            return [
                e
                for e in items
                if e.department == criteria.department and e.employee_number == criteria.employee_number
            ]
        if criteria.employed_from is not None and criteria.employed_to is not None:
            return [e for e in items if e.employed_during(criteria.employed_from, criteria.employed_to)]
        if criteria.include_inactive:
            return items
        return [e for e in items if e.is_active]


class InMemoryPayPeriods:
    def __init__(self, periods: Sequence[PayPeriod] = ()):
        self.by_id: dict[int, PayPeriod] = {p.pay_period_id: p for p in periods}
        self._next_id = max(self.by_id, default=0) + 1

    def add(self, start_date: datetime, end_date: datetime, *, completed: bool = False) -> PayPeriod:
        period = PayPeriod(self._next_id, start_date, end_date, completed)
        self.by_id[period.pay_period_id] = period
        self._next_id += 1
        return period

    def get_by_id(self, pay_period_id: int) -> Optional[PayPeriod]:
        return self.by_id.get(int(pay_period_id))

    def list_all(self) -> Sequence[PayPeriod]:
        return sorted(self.by_id.values(), key=lambda p: (p.completed, -p.start_date.timestamp()))

    def get_for_date(self, when: datetime) -> Optional[PayPeriod]:
        for period in sorted(self.by_id.values(), key=lambda p: p.start_date):
            if period.contains(when):
                return period
        return None

    def get_bounds(self) -> Optional[tuple[datetime, datetime]]:
        if not self.by_id:
            return None
        return (
            max(p.start_date for p in self.by_id.values()),
            max(p.end_date for p in self.by_id.values()),
        )

    def insert(self, *, start_date: datetime, end_date: datetime) -> int:
        return self.add(start_date, end_date).pay_period_id

    def mark_completed(self, pay_period_id: int) -> bool:
        period = self.by_id.get(int(pay_period_id))
        if not period or period.completed:
            return False
        self.by_id[period.pay_period_id] = replace(period, completed=True)
        return True


class InMemoryEntries:
    """Stores raw entries; ``pay_period_id`` and ``week`` are derived on read like the SQL join."""

    def __init__(self, periods: InMemoryPayPeriods):
        self._periods = periods
        self.rows: dict[int, Entry] = {}
        # Period id stamped at write time; approvals are scoped by it.
        self.stored_period: dict[int, Optional[int]] = {}
        self._next_id = 1

    def _read(self, entry: Entry) -> Entry:
        period = self._periods.get_for_date(entry.entry_date)
        return replace(
            entry,
            pay_period_id=period.pay_period_id if period else None,
            week=period.week_index(entry.entry_date) if period else 0,
        )

    def add(self, **values: Any) -> Entry:
        """Seed a row directly, bypassing the services."""
        values.setdefault("entry_id", self._next_id)
        values.setdefault("user_id", 0)
        values.setdefault("duration", 0)
        entry = Entry(**values)
        self._next_id = max(self._next_id, entry.entry_id) + 1
        period = self._periods.get_for_date(entry.entry_date)
        self.rows[entry.entry_id] = entry
        self.stored_period[entry.entry_id] = period.pay_period_id if period else None
        return self._read(entry)

    def insert_entry(self, *, employee_id, entry_type, user_id, entry_date, duration, note, pay_period_id) -> int:
        entry_id = self._next_id
        self._next_id += 1
        self.rows[entry_id] = Entry(
            entry_id=entry_id,
            employee_id=int(employee_id),
            entry_type=EntryType(entry_type),
            user_id=int(user_id),
            entry_date=entry_date,
            duration=int(duration),
            note=note,
        )
        self.stored_period[entry_id] = pay_period_id
        return entry_id

    def update_entry(self, *, entry_id, entry_type, user_id, entry_date, duration, note, pay_period_id) -> bool:
        entry = self.rows.get(int(entry_id))
        if entry is None:
            return False
        self.rows[entry.entry_id] = replace(
            entry,
            entry_type=EntryType(entry_type),
            user_id=int(user_id),
            entry_date=entry_date,
            duration=int(duration),
            note=note,
        )
        self.stored_period[entry.entry_id] = pay_period_id
        return True

    def get_entries(self, employee_id: int, entry_ids: Sequence[int]) -> Sequence[Entry]:
        wanted = {int(i) for i in entry_ids}
        found = [self._read(e) for e in self.rows.values() if e.entry_id in wanted and e.employee_id == int(employee_id)]
        return sorted(found, key=lambda e: (e.entry_date, int(e.entry_type)))

    def list_for_pay_period(self, employee_id: int, pay_period_id: int) -> Sequence[Entry]:
        period = self._periods.get_by_id(pay_period_id)
        if period is None:
            return []
        found = [
            self._read(e)
            for e in self.rows.values()
            if e.employee_id == int(employee_id) and period.contains(e.entry_date)
        ]
        return sorted(found, key=lambda e: (e.entry_date, int(e.entry_type)))

    def find_latest_open_entry_id(self, employee_id: int, entry_type: EntryType, *, now: datetime) -> Optional[int]:
        open_periods = [p for p in self._periods.by_id.values() if not p.completed and p.start_date < now]
        if not open_periods:
            return None
        lower = min(p.start_date for p in open_periods)
        upper = max(p.end_date for p in open_periods)
        candidates = [
            e
            for e in self.rows.values()
            if not e.deleted
            and e.employee_id == int(employee_id)
            and e.entry_type == entry_type
            and lower <= e.entry_date <= upper
            and e.entry_date < now
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda e: (e.entry_date, e.entry_id)).entry_id

    def mark_deleted(self, *, entry_id: int, deleted_by: int, note: str) -> bool:
        entry = self.rows.get(int(entry_id))
        if entry is None:
            return False
        self.rows[entry.entry_id] = replace(entry, deleted=True, deleted_by=deleted_by, note=note)
        return True

    def _in_period(self, employee_id: int, pay_period_id: int) -> list[Entry]:
        return [
            e
            for e in self.rows.values()
            if e.employee_id == int(employee_id) and self.stored_period.get(e.entry_id) == int(pay_period_id)
        ]

    def set_employee_approval(self, *, employee_id, pay_period_id, approved, approval_time) -> int:
        rows = self._in_period(employee_id, pay_period_id)
        for e in rows:
            self.rows[e.entry_id] = replace(e, employee_approved=approved, employee_approval_time=approval_time)
        return len(rows)

    def set_supervisor_approval(self, *, employee_id, pay_period_id, approved, approved_by, approval_time) -> int:
        rows = self._in_period(employee_id, pay_period_id)
        for e in rows:
            self.rows[e.entry_id] = replace(e, approved=approved, approved_by=approved_by, approval_time=approval_time)
        return len(rows)


class InMemoryActions:
    def __init__(self):
        self.rows: dict[int, EntryAction] = {}
        self._next_id = 1
        self.list_calls = 0

    def insert_action(self, *, entry_id, flags, action_time, ip, notes) -> int:
        action_id = self._next_id
        self._next_id += 1
        self.rows[action_id] = EntryAction(
            action_id=action_id,
            entry_id=int(entry_id),
            flags=ActionFlag(flags),
            action_time=action_time,
            ip=ip,
            notes=dict(notes),
        )
        return action_id

    def get_action(self, action_id: int) -> Optional[EntryAction]:
        return self.rows.get(int(action_id))

    def list_for_entries(self, entry_ids: Sequence[int]) -> Sequence[EntryAction]:
        self.list_calls += 1
        wanted = {int(i) for i in entry_ids}
        return sorted((a for a in self.rows.values() if a.entry_id in wanted), key=lambda a: a.action_id)


class Store:
    """One coherent set of fakes."""

    def __init__(self):
        self.periods = InMemoryPayPeriods()
        self.entries = InMemoryEntries(self.periods)
        self.actions = InMemoryActions()
        self.employees = InMemoryEmployees()
