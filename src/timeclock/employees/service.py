from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.validators import require_id
from ..core.constants import ERROR_INVALID_LOGIN
from ..core.exceptions import ClockActionError, NotFoundError, wraps_errors
from .model import Employee, EmployeeFilter
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @wraps_errors("load_employee")
    def find(self, employee_id: int) -> Optional[Employee]:
        found = self._employees.lookup(EmployeeFilter(employee_id=require_id(employee_id, "employee id")))
        return found[0] if found else None

    def get(self, employee_id: int) -> Employee:
        employee = self.find(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    @wraps_errors("load_employee_by_number")
    def get_by_number(self, department: str, employee_number: str) -> Employee:
        found = self._employees.lookup(EmployeeFilter(department=department, employee_number=employee_number))
        if not found:
            raise NotFoundError(f"Employee {department}-{employee_number} not found")
        return found[0]

    @wraps_errors("load_clock_action_employee")
    def find_by_login_code(self, login_code: Optional[str]) -> Employee:
        code = (login_code or "").strip()
        if not code:
            raise ClockActionError(ERROR_INVALID_LOGIN)
        found = self._employees.lookup(EmployeeFilter(login_code=code))
        if not found:
            logger.info("rejected unknown login code")
            raise ClockActionError(ERROR_INVALID_LOGIN)
        return found[0]

    @wraps_errors("load_pay_period_employees")
    def list_employed_during(self, start: datetime, end: datetime) -> list[Employee]:
        """Everyone on payroll for the window, including employees terminated since."""
        return list(self._employees.lookup(EmployeeFilter(employed_from=start, employed_to=end)))

    @wraps_errors("load_employees")
    def list_employees(self, *, include_inactive: bool = False) -> list[Employee]:
        return list(self._employees.lookup(EmployeeFilter(include_inactive=include_inactive)))
