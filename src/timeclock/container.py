from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .approvals.service import ApprovalService
from .clock.service import ClockService
from .core.constants import DEFAULT_API_USER_ID
from .core.rules import DEFAULT_RULES, ClockRules
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .entries.action_log import ActionLog
from .entries.mysql_action_repository import MySQLActionRepository
from .entries.mysql_entry_repository import MySQLEntryRepository
from .entries.repository import ActionRepository, EntryRepository
from .entries.service import EntryService
from .pay_periods.mysql_pay_period_repository import MySQLPayPeriodRepository
from .pay_periods.repository import PayPeriodRepository
from .pay_periods.service import PayPeriodService
from .payroll.service import PayrollService
from .salary.service import SalaryReconciliationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    entries_repo: EntryRepository
    actions_repo: ActionRepository
    pay_periods_repo: PayPeriodRepository

    rules: ClockRules
    action_log: ActionLog
    employee_service: EmployeeService
    approval_service: ApprovalService
    entry_service: EntryService
    salary_service: SalaryReconciliationService
    pay_period_service: PayPeriodService
    clock_service: ClockService
    payroll_service: PayrollService


def assemble(
    *,
    employees_repo: EmployeeRepository,
    entries_repo: EntryRepository,
    actions_repo: ActionRepository,
    pay_periods_repo: PayPeriodRepository,
    rules: ClockRules = DEFAULT_RULES,
    api_user_id: int = DEFAULT_API_USER_ID,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL or in-memory)."""
    action_log = ActionLog(actions_repo)
    employee_service = EmployeeService(employees_repo)
    approval_service = ApprovalService(entries_repo)
    entry_service = EntryService(entries_repo, action_log, pay_periods_repo, approval_service, rules=rules)
    salary_service = SalaryReconciliationService(
        employee_service,
        pay_periods_repo,
        entry_service,
        rules=rules,
        api_user_id=api_user_id,
    )
    # Entry writes trigger reconciliation, which writes entries.
    entry_service.bind_reconciler(salary_service)

    pay_period_service = PayPeriodService(pay_periods_repo, rules=rules)
    clock_service = ClockService(employee_service, entry_service, action_log)
    payroll_service = PayrollService(employee_service, pay_period_service, entry_service, rules=rules)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        entries_repo=entries_repo,
        actions_repo=actions_repo,
        pay_periods_repo=pay_periods_repo,
        rules=rules,
        action_log=action_log,
        employee_service=employee_service,
        approval_service=approval_service,
        entry_service=entry_service,
        salary_service=salary_service,
        pay_period_service=pay_period_service,
        clock_service=clock_service,
        payroll_service=payroll_service,
    )


def build_container(
    *,
    db_config: dict,
    rules: ClockRules = DEFAULT_RULES,
    api_user_id: int = DEFAULT_API_USER_ID,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        employees_repo=MySQLEmployeeRepository(conn),
        entries_repo=MySQLEntryRepository(conn),
        actions_repo=MySQLActionRepository(conn),
        pay_periods_repo=MySQLPayPeriodRepository(conn),
        rules=rules,
        api_user_id=api_user_id,
        conn=conn,
    )
