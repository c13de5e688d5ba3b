from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from timeclock.core.enums import EmployeeStatus, EntryType
from timeclock.core.exceptions import ClockActionError, NotFoundError
from timeclock.payroll.model import TYPE_HOUR_COLUMNS

from tests.fakes import make_employee

HOUR = 3600


@pytest.fixture
def seeded(store, period):
    store.employees.add(make_employee(1))
    store.employees.add(make_employee(2, salaried=True))
    for day in range(5):
        store.entries.add(
            employee_id=1,
            entry_type=EntryType.MANUAL,
            entry_date=datetime(2026, 1, 5, 7) + timedelta(days=day),
            duration=9 * HOUR,
        )
    store.entries.add(
        employee_id=1,
        entry_type=EntryType.PERSONAL_LEAVE,
        entry_date=datetime(2026, 1, 12, 8),
        duration=8 * HOUR,
    )
    return period


def test_pay_period_view(container, seeded, fixed_now):
    view = container.payroll_service.employee_pay_period(1, seeded.pay_period_id, now=fixed_now)

    assert view.employee.employee_id == 1
    assert view.pay_period == seeded
    assert len(view.entries) == 6
    assert not view.has_errors
    week0, week1 = view.totals
    assert week0.duration == 45 * HOUR
    assert week0.overtime == 5 * HOUR
    assert week1.personal_leave_duration == 8 * HOUR


def test_pay_period_view_flags_broken_sessions(container, store, seeded, fixed_now):
    # TIMECLOCK entry without any clock actions.
    store.entries.add(employee_id=1, entry_type=EntryType.TIMECLOCK, entry_date=datetime(2026, 1, 13, 8))

    view = container.payroll_service.employee_pay_period(1, seeded.pay_period_id, now=fixed_now)

    assert view.has_errors
    assert view.totals[1].has_errors
    assert not view.totals[0].has_errors


def test_pay_period_view_unknown_ids(container, seeded, fixed_now):
    with pytest.raises(NotFoundError):
        container.payroll_service.employee_pay_period(404, seeded.pay_period_id, now=fixed_now)
    with pytest.raises(NotFoundError):
        container.payroll_service.employee_pay_period(1, 404, now=fixed_now)


def test_current_period_by_login_code(container, seeded, fixed_now):
    view = container.payroll_service.employee_current_period("1001", now=fixed_now)

    assert view.pay_period.pay_period_id == seeded.pay_period_id
    assert view.to_dict()["employee"]["id"] == 1

    with pytest.raises(ClockActionError):
        container.payroll_service.employee_current_period("nope", now=fixed_now)


def test_current_period_outside_calendar(container, seeded):
    view = container.payroll_service.employee_current_period(employee_id=1, now=datetime(2027, 6, 1))

    assert view.pay_period is None
    assert view.entries == []


def test_totals_cover_active_employees(container, seeded, fixed_now):
    totals = container.payroll_service.employee_totals(seeded.pay_period_id, now=fixed_now)

    by_id = {t.employee.employee_id: t for t in totals}
    assert set(by_id) == {1, 2}
    assert by_id[1].weeks[0].duration == 45 * HOUR
    assert by_id[2].weeks[0].duration == 0
    assert by_id[2].to_dict()["pay_period_id"] == seeded.pay_period_id

    [single] = container.payroll_service.employee_totals(seeded.pay_period_id, 1, now=fixed_now)
    assert single.employee.employee_id == 1


def test_export_rows(container, seeded, fixed_now):
    rows = container.payroll_service.export_rows(seeded.pay_period_id, now=fixed_now)

    assert [(r["employee_number"], r["week"]) for r in rows] == [("101", 1), ("101", 2)]
    week1, week2 = rows
    assert week1["regular_hours"] == 40.0
    assert week1["overtime_hours"] == 5.0
    assert week1["total_hours"] == 45.0
    assert week1["pay_method"] == "H"
    assert week2["personal_leave_hours"] == 8.0
    assert week2["regular_hours"] == 8.0
    assert week2["employee_approval_time"] == ""


def test_export_rows_carry_approvals(container, seeded, fixed_now):
    container.approval_service.set_supervisor_approval(1, seeded.pay_period_id, 9, True, now=fixed_now)

    rows = container.payroll_service.export_rows(seeded.pay_period_id, now=fixed_now)

    assert all(r["supervisor_approval_time"] == "2026-01-14 12:00" for r in rows)
    assert all(r["approved_by"] == 9 for r in rows)


def test_totals_keep_employees_terminated_after_the_period_started(container, store, seeded, fixed_now):
    store.employees.add(
        make_employee(3, status=EmployeeStatus.TERMINATED, hire_date=date(2024, 3, 1), termination_date=date(2026, 1, 9))
    )
    store.employees.add(
        make_employee(4, status=EmployeeStatus.TERMINATED, hire_date=date(2024, 3, 1), termination_date=date(2025, 12, 1))
    )
    store.entries.add(employee_id=3, entry_type=EntryType.MANUAL, entry_date=datetime(2026, 1, 6, 8), duration=8 * HOUR)

    totals = container.payroll_service.employee_totals(seeded.pay_period_id, now=fixed_now)
    rows = container.payroll_service.export_rows(seeded.pay_period_id, now=fixed_now)

    assert {t.employee.employee_id for t in totals} == {1, 2, 3}
    assert [(r["employee_number"], r["total_hours"]) for r in rows if r["employee_number"] == "103"] == [("103", 8.0)]


def test_export_rows_split_hours_by_entry_type(container, store, seeded, fixed_now):
    store.entries.add(employee_id=1, entry_type=EntryType.HOLIDAY, entry_date=datetime(2026, 1, 13, 8), duration=8 * HOUR)
    store.entries.add(
        employee_id=1, entry_type=EntryType.HOLIDAY, entry_date=datetime(2026, 1, 14, 8), duration=8 * HOUR, deleted=True
    )

    week1, week2 = container.payroll_service.export_rows(seeded.pay_period_id, now=fixed_now)

    assert week1["hours_manual"] == 45.0
    assert week1["hours_holiday"] == 0.0
    assert week2["hours_personal_leave"] == 8.0
    assert week2["hours_holiday"] == 8.0
    assert week2["total_hours"] == 16.0
    assert set(TYPE_HOUR_COLUMNS.values()) <= set(week1)
