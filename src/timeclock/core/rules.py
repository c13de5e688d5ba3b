from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .enums import EntryType

HOUR = 60 * 60

# Type changes that keep existing approvals intact.
_APPROVAL_FREE_TRANSITIONS: Mapping[EntryType, frozenset[EntryType]] = {
    EntryType.HOLIDAY: frozenset({EntryType.MED_ASSIST, EntryType.BEREAVEMENT_JURY, EntryType.MANUAL}),
    EntryType.PERSONAL_LEAVE: frozenset({EntryType.HOLIDAY, EntryType.BEREAVEMENT_JURY, EntryType.MED_ASSIST}),
    EntryType.MED_ASSIST: frozenset({EntryType.MANUAL, EntryType.HOLIDAY}),
}


@dataclass(frozen=True)
class ClockRules:
    """Thresholds and tables shared by validation, totals and reconciliation."""

    standard_week_seconds: int = 40 * HOUR
    missing_clock_max_hours: int = 16
    period_length_days: int = 14
    max_periods_per_run: int = 52
    approval_free_transitions: Mapping[EntryType, frozenset[EntryType]] = field(
        default_factory=lambda: dict(_APPROVAL_FREE_TRANSITIONS)
    )

    @classmethod
    def from_settings(cls, settings) -> "ClockRules":
        return cls(
            standard_week_seconds=int(float(getattr(settings, "STANDARD_WEEK_HOURS", 40)) * HOUR),
            missing_clock_max_hours=int(getattr(settings, "MISSING_CLOCK_MAX_HOURS", 16)),
        )


DEFAULT_RULES = ClockRules()
