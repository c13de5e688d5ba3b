from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from timeclock.core.enums import EntryType
from timeclock.core.exceptions import ValidationError

from tests.fakes import make_employee

HOUR = 3600


@pytest.fixture
def entries(store, period):
    store.employees.add(make_employee(1))
    store.employees.add(make_employee(2))
    return [
        store.entries.add(employee_id=1, entry_type=EntryType.MANUAL, entry_date=datetime(2026, 1, 6, 8), duration=8 * HOUR),
        store.entries.add(employee_id=1, entry_type=EntryType.HOLIDAY, entry_date=datetime(2026, 1, 13, 8), duration=8 * HOUR),
        store.entries.add(employee_id=2, entry_type=EntryType.MANUAL, entry_date=datetime(2026, 1, 6, 8), duration=8 * HOUR),
    ]


def _rows(store, employee_id):
    return [e for e in store.entries.rows.values() if e.employee_id == employee_id]


def test_employee_approval_covers_the_whole_period(container, store, period, entries, fixed_now):
    updated = container.approval_service.set_employee_approval(1, period.pay_period_id, True, now=fixed_now)

    assert updated == 2
    assert all(e.employee_approved and e.employee_approval_time == fixed_now for e in _rows(store, 1))
    assert not any(e.employee_approved for e in _rows(store, 2))


def test_employee_approval_is_idempotent(container, store, period, entries, fixed_now):
    container.approval_service.set_employee_approval(1, period.pay_period_id, True, now=fixed_now)
    first = [(e.entry_id, e.employee_approved) for e in _rows(store, 1)]

    container.approval_service.set_employee_approval(1, period.pay_period_id, True, now=fixed_now + timedelta(minutes=5))
    second = [(e.entry_id, e.employee_approved) for e in _rows(store, 1)]

    assert first == second
    assert all(e.employee_approval_time == fixed_now + timedelta(minutes=5) for e in _rows(store, 1))


def test_supervisor_approval_stamps_and_clears_approver(container, store, period, entries, fixed_now):
    container.approval_service.set_supervisor_approval(1, period.pay_period_id, 9, True, now=fixed_now)
    assert all(e.approved and e.approved_by == 9 and e.approval_time == fixed_now for e in _rows(store, 1))

    container.approval_service.set_supervisor_approval(1, period.pay_period_id, 9, False, now=fixed_now)
    assert all(not e.approved and e.approved_by is None and e.approval_time is None for e in _rows(store, 1))


def test_reset_withdraws_both_sign_offs(container, store, period, entries, fixed_now):
    container.approval_service.set_employee_approval(1, period.pay_period_id, True, now=fixed_now)
    container.approval_service.set_supervisor_approval(1, period.pay_period_id, 9, True, now=fixed_now)

    container.approval_service.reset(1, period.pay_period_id)

    assert not any(e.approved or e.employee_approved for e in _rows(store, 1))


def test_approved_week_totals_follow_approval(container, period, entries, fixed_now):
    container.approval_service.set_employee_approval(1, period.pay_period_id, True, now=fixed_now)
    container.approval_service.set_supervisor_approval(1, period.pay_period_id, 9, True, now=fixed_now)

    view = container.payroll_service.employee_pay_period(1, period.pay_period_id, now=fixed_now)

    assert all(w.approved and w.employee_approved for w in view.totals)
    assert view.totals[0].approved_by == 9


def test_ids_must_be_numeric(container, period):
    with pytest.raises(ValidationError):
        container.approval_service.set_employee_approval("abc", period.pay_period_id, True)
    with pytest.raises(ValidationError):
        container.approval_service.set_supervisor_approval(1, period.pay_period_id, None, True)
