from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from timeclock.core.enums import ActionFlag, EntryType
from timeclock.core.exceptions import NotFoundError, ValidationError
from timeclock.entries.model import EntryUpdate, NewEntry

from tests.fakes import make_employee

HOUR = 3600
APPROVED_AT = datetime(2026, 1, 9, 17, 0, 0)


@pytest.fixture
def employee(store):
    return store.employees.add(make_employee(1))


def _approved_manual(store, when: datetime, hours: int = 8):
    return store.entries.add(
        employee_id=1,
        entry_type=EntryType.MANUAL,
        entry_date=when,
        duration=hours * HOUR,
        employee_approved=True,
        employee_approval_time=APPROVED_AT,
        approved=True,
        approval_time=APPROVED_AT,
        approved_by=5,
    )


def test_create_requires_employee(container, period, fixed_now):
    with pytest.raises(ValidationError, match="Invalid employee"):
        container.entry_service.create_entry(NewEntry(employee_id=0, entry_type=EntryType.MANUAL), now=fixed_now)


def test_create_defaults_date_and_stamps_period(container, period, employee, fixed_now):
    entry = container.entry_service.create_entry(
        NewEntry(employee_id=1, entry_type=EntryType.MANUAL, duration=2 * HOUR, note="training"),
        now=fixed_now,
    )

    assert entry.entry_date == fixed_now
    assert entry.pay_period_id == period.pay_period_id
    assert entry.week == 1
    assert entry.duration == 2 * HOUR
    assert entry.note == "training"


def test_create_outside_any_period_is_stored_without_one(container, period, employee, fixed_now):
    entry = container.entry_service.create_entry(
        NewEntry(employee_id=1, entry_type=EntryType.MANUAL, entry_date=datetime(2025, 6, 1, 8, 0, 0), duration=HOUR),
        now=fixed_now,
    )

    assert entry is not None
    assert entry.pay_period_id is None


def test_create_resets_period_approvals(container, store, period, employee, fixed_now):
    existing = _approved_manual(store, datetime(2026, 1, 6, 8, 0, 0))

    container.entry_service.create_entry(
        NewEntry(employee_id=1, entry_type=EntryType.HOLIDAY, entry_date=datetime(2026, 1, 7, 8, 0, 0), duration=8 * HOUR),
        now=fixed_now,
    )

    reloaded = container.entry_service.load_entry(1, existing.entry_id, now=fixed_now)
    assert reloaded.approved is False
    assert reloaded.approved_by is None
    assert reloaded.employee_approved is False
    assert reloaded.employee_approval_time is None


def test_automatic_entries_do_not_reset_approvals(container, store, period, employee, fixed_now):
    existing = _approved_manual(store, datetime(2026, 1, 6, 8, 0, 0))

    container.entry_service.create_entry(
        NewEntry(employee_id=1, entry_type=EntryType.AUTOMATIC, entry_date=period.start_date, duration=HOUR),
        now=fixed_now,
    )

    assert container.entry_service.load_entry(1, existing.entry_id, now=fixed_now).approved is True


def test_update_timeclock_keeps_stored_duration(container, store, period, employee, fixed_now):
    stored = store.entries.add(
        employee_id=1,
        entry_type=EntryType.TIMECLOCK,
        entry_date=datetime(2026, 1, 6, 8, 0, 0),
        duration=8 * HOUR,
    )

    updated = container.entry_service.update_entry(
        EntryUpdate.from_entry(stored, duration=20 * HOUR, note="fixed"),
        now=fixed_now,
    )

    assert updated.duration == 8 * HOUR
    assert updated.note == "fixed"


def test_update_duration_of_approved_entry_resets_approvals(container, store, period, employee, fixed_now):
    existing = _approved_manual(store, datetime(2026, 1, 6, 8, 0, 0))

    updated = container.entry_service.update_entry(EntryUpdate.from_entry(existing, duration=6 * HOUR), now=fixed_now)

    assert updated.duration == 6 * HOUR
    assert updated.approved is False
    assert updated.employee_approved is False


def test_update_note_only_keeps_approvals(container, store, period, employee, fixed_now):
    existing = _approved_manual(store, datetime(2026, 1, 6, 8, 0, 0))

    updated = container.entry_service.update_entry(EntryUpdate.from_entry(existing, note="typo"), now=fixed_now)

    assert updated.note == "typo"
    assert updated.approved is True


def test_update_type_change_follows_transition_table(container, store, period, employee, fixed_now):
    holiday = store.entries.add(
        employee_id=1,
        entry_type=EntryType.HOLIDAY,
        entry_date=datetime(2026, 1, 6, 8, 0, 0),
        duration=8 * HOUR,
        approved=True,
        approved_by=5,
        approval_time=APPROVED_AT,
    )

    kept = container.entry_service.update_entry(
        EntryUpdate.from_entry(holiday, entry_type=EntryType.MED_ASSIST), now=fixed_now
    )
    assert kept.approved is True

    reset = container.entry_service.update_entry(
        EntryUpdate.from_entry(kept, entry_type=EntryType.PERSONAL_LEAVE), now=fixed_now
    )
    assert reset.approved is False


def test_update_without_id_creates(container, period, employee, fixed_now):
    entry = container.entry_service.update_entry(
        EntryUpdate(
            entry_id=0,
            employee_id=1,
            entry_type=EntryType.MANUAL,
            user_id=4,
            entry_date=datetime(2026, 1, 8, 8, 0, 0),
            duration=HOUR,
        ),
        now=fixed_now,
    )

    assert entry.entry_id > 0
    assert entry.user_id == 4


def test_update_requires_a_date(container, store, period, employee, fixed_now):
    existing = _approved_manual(store, datetime(2026, 1, 6, 8, 0, 0))

    with pytest.raises(ValidationError, match="Invalid entry date"):
        container.entry_service.update_entry(EntryUpdate.from_entry(existing, entry_date=None), now=fixed_now)


def test_update_unknown_entry_is_not_found(container, period, employee, fixed_now):
    with pytest.raises(NotFoundError):
        container.entry_service.update_entry(
            EntryUpdate(
                entry_id=404,
                employee_id=1,
                entry_type=EntryType.MANUAL,
                user_id=0,
                entry_date=fixed_now,
                duration=HOUR,
            ),
            now=fixed_now,
        )


def test_load_entry_id_handling(container, period, employee, fixed_now):
    assert container.entry_service.load_entry(1, 0, now=fixed_now) is None
    assert container.entry_service.load_entry(1, 404, now=fixed_now) is None

    with pytest.raises(ValidationError):
        container.entry_service.load_entry(1, "abc", now=fixed_now)
    with pytest.raises(ValidationError):
        container.entry_service.load_entry(1, None, now=fixed_now)


def test_load_entry_is_validated_against_siblings(container, store, period, employee, fixed_now):
    first = store.entries.add(employee_id=1, entry_type=EntryType.TIMECLOCK, entry_date=fixed_now - timedelta(hours=3))
    second = store.entries.add(employee_id=1, entry_type=EntryType.TIMECLOCK, entry_date=fixed_now - timedelta(hours=1))
    container.action_log.append(first.entry_id, ActionFlag.CLOCK_IN, first.entry_date)
    container.action_log.append(second.entry_id, ActionFlag.CLOCK_IN, second.entry_date)

    loaded_first = container.entry_service.load_entry(1, first.entry_id, now=fixed_now)
    loaded_second = container.entry_service.load_entry(1, second.entry_id, now=fixed_now)

    assert loaded_first.is_clocked_in is False
    assert loaded_first.has_errors
    assert loaded_second.is_clocked_in is True
    assert loaded_second.duration == HOUR


def test_latest_open_entry_skips_deleted_and_future(container, store, period, employee, fixed_now):
    kept = store.entries.add(employee_id=1, entry_type=EntryType.TIMECLOCK, entry_date=fixed_now - timedelta(hours=5))
    store.entries.add(employee_id=1, entry_type=EntryType.TIMECLOCK, entry_date=fixed_now - timedelta(hours=2), deleted=True)
    store.entries.add(employee_id=1, entry_type=EntryType.TIMECLOCK, entry_date=fixed_now + timedelta(hours=2))
    store.entries.add(employee_id=1, entry_type=EntryType.MANUAL, entry_date=fixed_now - timedelta(hours=1))

    latest = container.entry_service.load_latest_open_entry(1, now=fixed_now)

    assert latest.entry_id == kept.entry_id


def test_latest_open_entry_ignores_completed_periods(container, store, employee, fixed_now):
    store.periods.add(datetime(2026, 1, 5), datetime(2026, 1, 18, 23, 59, 59), completed=True)
    store.entries.add(employee_id=1, entry_type=EntryType.TIMECLOCK, entry_date=fixed_now - timedelta(hours=5))

    assert container.entry_service.load_latest_open_entry(1, now=fixed_now) is None


def test_soft_delete_appends_comment_and_keeps_actions(container, store, period, employee, fixed_now):
    entry = store.entries.add(
        employee_id=1,
        entry_type=EntryType.TIMECLOCK,
        entry_date=fixed_now - timedelta(hours=2),
        note="first",
    )
    container.action_log.append(entry.entry_id, ActionFlag.CLOCK_IN, entry.entry_date)

    deleted = container.entry_service.soft_delete(entry, 5, "duplicate punch", now=fixed_now)

    assert deleted.deleted is True
    assert deleted.deleted_by == 5
    assert deleted.note == "first;duplicate punch"
    assert len(deleted.actions) == 1
    assert deleted.is_clocked_in is False

    entries = container.entry_service.load_pay_period_entries(1, period.pay_period_id, now=fixed_now)
    assert [e.entry_id for e in entries] == [entry.entry_id]
    assert entries[0].errors == ()
