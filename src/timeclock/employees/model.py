from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import EmployeeStatus, PayMethod


@dataclass(frozen=True)
class Employee:
    employee_id: int
    login_code: Optional[str]
    department: str
    employee_number: str
    first_name: str
    last_name: str
    status: EmployeeStatus
    pay_method: PayMethod
    hire_date: Optional[date] = None
    termination_date: Optional[date] = None
    hours_accrued: float = 0.0
    hours_used: float = 0.0
    annual_hour_limit: float = 0.0
    carry_over_hours: float = 0.0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    @property
    def is_salaried(self) -> bool:
        return self.pay_method == PayMethod.SALARIED

    def employed_during(self, start: datetime, end: datetime) -> bool:
        """Active now, or hired before ``end`` and not terminated before ``start``."""
        if self.is_active:
            return True
        if self.termination_date and datetime.combine(self.termination_date, time.min) <= start:
            return False
        return not self.hire_date or datetime.combine(self.hire_date, time.min) < end

    @property
    def hours_available(self) -> float:
        return self.carry_over_hours + self.hours_accrued - self.hours_used

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "department": self.department,
            "employee_number": self.employee_number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "status": self.status.value,
            "pay_method": self.pay_method.value,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "termination_date": self.termination_date.isoformat() if self.termination_date else None,
            "hours_accrued": self.hours_accrued,
            "hours_used": self.hours_used,
            "annual_hour_limit": self.annual_hour_limit,
            "carry_over_hours": self.carry_over_hours,
            "hours_available": self.hours_available,
        }


@dataclass(frozen=True)
class EmployeeFilter:
    """Exactly one selector is expected; an empty filter selects everyone."""

    login_code: Optional[str] = None
    employee_id: Optional[int] = None
    department: Optional[str] = None
    employee_number: Optional[str] = None
    include_inactive: bool = False
    # Employed at some point in [employed_from, employed_to]; active employees always match.
    employed_from: Optional[datetime] = None
    employed_to: Optional[datetime] = None
