from __future__ import annotations

from enum import Enum, Flag, IntEnum


class Role(str, Enum):
    """Roles resolved upstream and stored in the shared session."""

    ADMIN = "tcadmin"
    SUPERVISOR = "tcsupervisor"
    EMPLOYEE = "employee"


class EntryType(IntEnum):
    """Kind of time recorded by an entry; values are the persisted codes."""

    TIMECLOCK = 1
    MANUAL = 2
    HOLIDAY = 3
    PERSONAL_LEAVE = 4
    BEREAVEMENT_JURY = 5
    OVERTIME = 6
    AUTOMATIC = 7
    COMPANY_TIME = 8
    SWAP_TIME = 9
    MED_ASSIST = 10
    FMLA_100 = 11
    FMLA_67 = 12

    @property
    def description(self) -> str:
        return _ENTRY_TYPE_DESCRIPTIONS[self]


_ENTRY_TYPE_DESCRIPTIONS = {
    EntryType.TIMECLOCK: "Timeclock",
    EntryType.MANUAL: "Manual Entry",
    EntryType.HOLIDAY: "Holiday",
    EntryType.PERSONAL_LEAVE: "Personal Leave",
    EntryType.BEREAVEMENT_JURY: "Jury / Bereavement",
    EntryType.OVERTIME: "Overtime",
    EntryType.AUTOMATIC: "Auto Generated",
    EntryType.COMPANY_TIME: "Company Time",
    EntryType.SWAP_TIME: "Swap Time",
    EntryType.MED_ASSIST: "Medical Assist",
    EntryType.FMLA_100: "FMLA 100%",
    EntryType.FMLA_67: "FMLA 67%",
}


class ActionFlag(Flag):
    """Capabilities carried by a single clock action.

    Flags combine freely: an adjustment that moves the clock-out time is
    ``ADJUSTMENT | CLOCK_OUT``. Always test membership, never equality.
    """

    NONE = 0
    ADJUSTMENT = 1
    CLOCK_IN = 2
    CLOCK_OUT = 4
    COMMENT = 8


class EmployeeStatus(str, Enum):
    ACTIVE = "A"
    INACTIVE = "I"
    TERMINATED = "T"


class PayMethod(str, Enum):
    HOURLY = "H"
    SALARIED = "S"
