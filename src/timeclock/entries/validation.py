"""Clock state reconstruction.

Everything here is pure: entries and their actions go in, new ``Entry``
instances carrying ``is_clocked_in``, ``errors`` and (for open sessions) a
live ``duration`` come out. Nothing is persisted.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import seconds_between
from ..core.constants import ERROR_MISSING_ALL_ACTIONS, ERROR_MISSING_CLOCK_IN, ERROR_MISSING_CLOCK_OUT
from ..core.enums import ActionFlag, EntryType
from ..core.rules import DEFAULT_RULES, ClockRules
from .model import Entry, EntryAction


def is_clocked_in(actions: Iterable[EntryAction]) -> bool:
    """At least one clock-in bit and no clock-out bit across all actions."""
    actions = list(actions)
    return any(a.is_clock_in for a in actions) and not any(a.is_clock_out for a in actions)


def latest_action(actions: Iterable[EntryAction], flag: ActionFlag) -> Optional[EntryAction]:
    """Most recently appended action carrying ``flag`` (by action id)."""
    return max((a for a in actions if flag in a.flags), key=lambda a: a.action_id, default=None)


def decorate(entry: Entry, actions: Iterable[EntryAction]) -> Entry:
    own = tuple(sorted((a for a in actions if a.entry_id == entry.entry_id), key=lambda a: a.action_id))
    return replace(
        entry,
        actions=own,
        errors=(),
        is_clocked_in=not entry.deleted and is_clocked_in(own),
    )


def session_duration(entry: Entry) -> Optional[int]:
    """Closed session length from the latest clock-in/clock-out pair, if both exist."""
    clock_in = latest_action(entry.actions, ActionFlag.CLOCK_IN)
    clock_out = latest_action(entry.actions, ActionFlag.CLOCK_OUT)
    if not clock_in or not clock_out:
        return None
    return max(seconds_between(clock_in.action_time, clock_out.action_time), 0)


def validate_entries(entries: Sequence[Entry], *, now: datetime, rules: ClockRules = DEFAULT_RULES) -> list[Entry]:
    """Validate one pay period's entries for one employee.

    Entries are returned sorted by entry date. Only non-deleted TIMECLOCK
    entries are inspected; the others pass through with empty errors.
    """
    ordered = sorted(entries, key=lambda e: (e.entry_date, e.entry_id))
    return [_validate_entry(entry, ordered, now=now, rules=rules) for entry in ordered]


def _validate_entry(entry: Entry, siblings: Sequence[Entry], *, now: datetime, rules: ClockRules) -> Entry:
    entry = replace(entry, errors=())
    if entry.entry_type != EntryType.TIMECLOCK or entry.deleted:
        return entry

    clock_in = latest_action(entry.actions, ActionFlag.CLOCK_IN)
    clock_out = latest_action(entry.actions, ActionFlag.CLOCK_OUT)

    if clock_in and clock_out:
        return entry

    if not clock_in:
        errors = [ERROR_MISSING_CLOCK_IN]
        if not clock_out:
            errors.insert(0, ERROR_MISSING_ALL_ACTIONS)
        return replace(entry, errors=tuple(errors), is_clocked_in=False)

    clock_in_time = clock_in.action_time
    has_later_entry = any(
        other.entry_type == EntryType.TIMECLOCK
        and other.entry_id != entry.entry_id
        and other.entry_date > clock_in_time
        for other in siblings
    )
    expired = clock_in_time + timedelta(hours=rules.missing_clock_max_hours) < now

    # Either condition alone closes the session.
    if has_later_entry or expired:
        return replace(entry, is_clocked_in=False, errors=(ERROR_MISSING_CLOCK_OUT,))

    return replace(entry, is_clocked_in=True, duration=max(seconds_between(clock_in_time, now), 0))


def requires_approval(from_type: EntryType, to_type: EntryType, rules: ClockRules = DEFAULT_RULES) -> bool:
    """Whether changing an entry's type invalidates existing approvals."""
    from_type, to_type = EntryType(from_type), EntryType(to_type)
    if from_type == to_type:
        return False
    return to_type not in rules.approval_free_transitions.get(from_type, frozenset())
