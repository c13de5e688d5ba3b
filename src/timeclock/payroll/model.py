from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import EntryType
from ..employees.model import Employee
from ..entries.model import Entry, WeekTotal
from ..pay_periods.model import PayPeriod


@dataclass(frozen=True)
class EmployeePayPeriod:
    employee: Employee
    pay_period: Optional[PayPeriod]
    entries: list[Entry]
    has_errors: bool
    totals: list[WeekTotal]

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.to_dict(),
            "pay_period": self.pay_period.to_dict() if self.pay_period else None,
            "entries": [e.to_dict() for e in self.entries],
            "has_errors": self.has_errors,
            "totals": [t.to_dict() for t in self.totals],
        }


@dataclass(frozen=True)
class EmployeePayPeriodTotal:
    employee: Employee
    pay_period_id: int
    weeks: list[WeekTotal]
    # Source rows for per-type breakdowns; not serialised.
    entries: list[Entry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            **self.employee.to_dict(),
            "pay_period_id": self.pay_period_id,
            "weeks": [w.to_dict() for w in self.weeks],
        }


# Hours per entry type, one column each.
TYPE_HOUR_COLUMNS = {entry_type: f"hours_{entry_type.name.lower()}" for entry_type in EntryType}

# Column order of the CSV / XLSX downloads.
EXPORT_COLUMNS = [
    "employee_name",
    "department",
    "employee_number",
    "pay_method",
    "week",
    "regular_hours",
    "overtime_hours",
    "personal_leave_hours",
    "total_hours",
    *TYPE_HOUR_COLUMNS.values(),
    "employee_approval_time",
    "supervisor_approval_time",
    "approved_by",
    "has_errors",
]
