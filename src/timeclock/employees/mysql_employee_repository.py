from __future__ import annotations

from typing import Sequence

from ..core.enums import EmployeeStatus, PayMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Employee, EmployeeFilter
from .repository import EmployeeRepository


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        login_code=r.get("login_code"),
        department=r.get("department") or "",
        employee_number=r.get("employee_number") or "",
        first_name=r.get("first_name") or "",
        last_name=r.get("last_name") or "",
        status=EmployeeStatus(r.get("status") or "A"),
        pay_method=PayMethod(r.get("pay_method") or "H"),
        hire_date=r.get("hire_date"),
        termination_date=r.get("termination_date"),
        hours_accrued=float(r.get("hours_accrued") or 0),
        hours_used=float(r.get("hours_used") or 0),
        annual_hour_limit=float(r.get("annual_hour_limit") or 0),
        carry_over_hours=float(r.get("carry_over_hours") or 0),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def lookup(self, criteria: EmployeeFilter) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list[object] = []

        if criteria.login_code is not None:
            clauses.append("login_code=%s AND status='A'")
            params.append(criteria.login_code)
        elif criteria.employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(criteria.employee_id))
        elif criteria.department is not None and criteria.employee_number is not None:
            clauses.append("department=%s AND employee_number=%s")
            params.extend([criteria.department, criteria.employee_number])
        elif criteria.employed_from is not None and criteria.employed_to is not None:
            clauses.append(
                "(status='A' OR ((termination_date IS NULL OR termination_date > %s)"
                " AND (hire_date IS NULL OR hire_date < %s)))"
            )
            params.extend([criteria.employed_from, criteria.employed_to])
        elif not criteria.include_inactive:
            clauses.append("status='A'")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, login_code, department, employee_number, first_name, last_name,
                       status, pay_method, hire_date, termination_date,
                       hours_accrued, hours_used, annual_hour_limit, carry_over_hours
                FROM employees
                {where}
                ORDER BY first_name, last_name, employee_number
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]
