from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_id
from ..core.enums import EntryType
from ..core.exceptions import wraps_errors
from ..core.rules import DEFAULT_RULES, ClockRules
from ..employees.model import Employee
from ..employees.service import EmployeeService
from ..entries.service import EntryService
from ..entries.totals import compute_week_totals
from ..pay_periods.model import PayPeriod
from ..pay_periods.service import PayPeriodService
from .model import TYPE_HOUR_COLUMNS, EmployeePayPeriod, EmployeePayPeriodTotal

logger = logging.getLogger(__name__)


def _hours(seconds: int) -> float:
    return round(seconds / 3600, 2)


class PayrollService:
    """Read models for supervisors and payroll: per-period entries and totals."""

    def __init__(
        self,
        employees: EmployeeService,
        pay_periods: PayPeriodService,
        entry_service: EntryService,
        *,
        rules: ClockRules = DEFAULT_RULES,
    ):
        self._employees = employees
        self._pay_periods = pay_periods
        self._entry_service = entry_service
        self._rules = rules

    def _build(self, employee: Employee, pay_period, *, now: datetime) -> EmployeePayPeriod:
        entries = []
        if pay_period is not None:
            entries = self._entry_service.load_pay_period_entries(employee.employee_id, pay_period.pay_period_id, now=now)
        return EmployeePayPeriod(
            employee=employee,
            pay_period=pay_period,
            entries=entries,
            has_errors=any(e.has_errors for e in entries),
            totals=compute_week_totals(entries, rules=self._rules),
        )

    @wraps_errors("get_employee_pay_period")
    def employee_pay_period(
        self,
        employee_id: int,
        pay_period_id: int,
        *,
        now: Optional[datetime] = None,
    ) -> EmployeePayPeriod:
        employee = self._employees.get(employee_id)
        period = self._pay_periods.get(pay_period_id)
        return self._build(employee, period, now=now or now_local())

    @wraps_errors("get_employee")
    def employee_current_period(
        self,
        login_code: Optional[str] = None,
        *,
        employee_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> EmployeePayPeriod:
        """Current-period view, by login code (kiosk) or by id (supervisor)."""
        now = now or now_local()
        if employee_id is not None:
            employee = self._employees.get(employee_id)
        else:
            employee = self._employees.find_by_login_code(login_code)
        return self._build(employee, self._pay_periods.current(now), now=now)

    def _period_employees(self, period: PayPeriod, employee_id: Optional[int]) -> list[Employee]:
        if employee_id:
            return [self._employees.get(require_id(employee_id, "employee id"))]
        return self._employees.list_employed_during(period.start_date, period.end_date)

    @wraps_errors("get_employee_totals")
    def employee_totals(
        self,
        pay_period_id: int,
        employee_id: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> list[EmployeePayPeriodTotal]:
        now = now or now_local()
        period = self._pay_periods.get(pay_period_id)

        out = []
        for employee in self._period_employees(period, employee_id):
            entries = self._entry_service.load_pay_period_entries(employee.employee_id, period.pay_period_id, now=now)
            out.append(
                EmployeePayPeriodTotal(
                    employee=employee,
                    pay_period_id=period.pay_period_id,
                    weeks=compute_week_totals(entries, rules=self._rules),
                    entries=entries,
                )
            )
        logger.debug("computed totals for %s employees in pay period %s", len(out), period.pay_period_id)
        return out

    def export_rows(self, pay_period_id: int, *, now: Optional[datetime] = None) -> list[dict]:
        """One row per employee and week with hours in decimal form.

        Weeks without any recorded time are left out.
        """
        rows: list[dict] = []
        for total in self.employee_totals(pay_period_id, now=now):
            employee = total.employee
            for index, week in enumerate(total.weeks):
                if not week.duration:
                    continue
                by_type = {entry_type: 0 for entry_type in EntryType}
                for entry in total.entries:
                    if not entry.deleted and (1 if entry.week else 0) == index:
                        by_type[entry.entry_type] += entry.duration

                regular = min(week.duration, self._rules.standard_week_seconds)
                rows.append(
                    {
                        "employee_name": employee.full_name,
                        "department": employee.department,
                        "employee_number": employee.employee_number,
                        "pay_method": employee.pay_method.value,
                        "week": index + 1,
                        "regular_hours": _hours(regular),
                        "overtime_hours": _hours(week.overtime),
                        "personal_leave_hours": _hours(week.personal_leave_duration),
                        "total_hours": _hours(week.duration),
                        **{TYPE_HOUR_COLUMNS[t]: _hours(seconds) for t, seconds in by_type.items()},
                        "employee_approval_time": _fmt(week.employee_approval_time),
                        "supervisor_approval_time": _fmt(week.approval_time),
                        "approved_by": week.approved_by or "",
                        "has_errors": week.has_errors,
                    }
                )
        return rows


def _fmt(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else ""
