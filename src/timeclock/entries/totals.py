from __future__ import annotations

from typing import Iterable

from ..core.enums import EntryType
from ..core.rules import DEFAULT_RULES, ClockRules
from .model import Entry, WeekTotal


def compute_week_totals(
    entries: Iterable[Entry],
    *,
    exclude_automatic: bool = False,
    rules: ClockRules = DEFAULT_RULES,
) -> list[WeekTotal]:
    """Fold a pay period's entries into ``[week 0, week 1]`` totals.

    Approvals are AND-accumulated: a week is approved only while every
    contributing entry is approved, and the timestamp/approver follow the
    latest contributing entry only as long as that holds.
    """
    entries = list(entries)
    weeks = [WeekTotal(), WeekTotal()]
    if not entries:
        # Nothing to approve.
        for week in weeks:
            week.approved = False
            week.employee_approved = False

    for entry in sorted(entries, key=lambda e: (e.entry_date, e.entry_id)):
        if entry.deleted:
            continue
        if exclude_automatic and entry.entry_type == EntryType.AUTOMATIC:
            continue

        week = weeks[1 if entry.week else 0]
        week.duration += entry.duration
        week.overtime = max(0, week.duration - rules.standard_week_seconds)
        week.has_errors = week.has_errors or entry.has_errors

        week.approved = week.approved and entry.approved
        week.approved_by = entry.approved_by if week.approved else None
        week.approval_time = entry.approval_time if week.approved else None

        week.employee_approved = week.employee_approved and entry.employee_approved
        week.employee_approval_time = entry.employee_approval_time if week.employee_approved else None

        if entry.entry_type == EntryType.TIMECLOCK:
            week.is_clocked_in = week.is_clocked_in or entry.is_clocked_in
        if entry.entry_type == EntryType.PERSONAL_LEAVE:
            week.personal_leave_duration += entry.duration

    return weeks
