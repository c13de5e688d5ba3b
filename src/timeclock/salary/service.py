from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_id
from ..core.constants import AUTO_ENTRY_NOTE, DEFAULT_API_USER_ID
from ..core.enums import EntryType
from ..core.exceptions import LifecycleError, NotFoundError, wraps_errors
from ..core.rules import DEFAULT_RULES, ClockRules
from ..employees.service import EmployeeService
from ..entries.model import Entry, EntryUpdate, NewEntry
from ..entries.service import EntryService
from ..entries.totals import compute_week_totals
from ..pay_periods.repository import PayPeriodRepository

logger = logging.getLogger(__name__)


class SalaryReconciliationService:
    """Tops salaried employees up to the standard week with AUTOMATIC entries.

    At most one AUTOMATIC entry exists per employee and week; it is created
    on the first shortfall and resized afterwards, down to zero.
    """

    def __init__(
        self,
        employees: EmployeeService,
        periods: PayPeriodRepository,
        entry_service: EntryService,
        *,
        rules: ClockRules = DEFAULT_RULES,
        api_user_id: int = DEFAULT_API_USER_ID,
    ):
        self._employees = employees
        self._periods = periods
        self._entry_service = entry_service
        self._rules = rules
        self._api_user_id = api_user_id

    @wraps_errors("auto_generate_salary_entries")
    def reconcile(self, employee_id: int, pay_period_id: int, *, now: Optional[datetime] = None) -> list[Entry]:
        now = now or now_local()
        employee_id = require_id(employee_id, "employee id")
        pay_period_id = require_id(pay_period_id, "pay period id")

        employee = self._employees.find(employee_id)
        if not employee or not employee.is_active or not employee.is_salaried:
            return []

        period = self._periods.get_by_id(pay_period_id)
        if not period:
            raise NotFoundError(f"Pay period {pay_period_id} not found")
        if period.completed:
            raise LifecycleError(f"Pay period {pay_period_id} is completed")

        entries = self._entry_service.load_pay_period_entries(employee_id, pay_period_id, now=now)

        automatic: list[Optional[Entry]] = [None, None]
        for entry in entries:
            if entry.deleted or not entry.is_automatic:
                continue
            week = 1 if entry.week else 0
            if automatic[week] is None:
                automatic[week] = entry
            else:
                logger.warning(
                    "employee %s has more than one automatic entry in week %s of pay period %s",
                    employee_id,
                    week,
                    pay_period_id,
                )

        totals = compute_week_totals(entries, exclude_automatic=True, rules=self._rules)
        week_starts = (period.start_date, period.week2_start_date)

        written: list[Entry] = []
        for week, total in enumerate(totals):
            shortfall = max(0, self._rules.standard_week_seconds - total.duration)
            existing = automatic[week]

            if existing is None:
                if shortfall <= 0:
                    continue
                entry = self._entry_service.create_entry(
                    NewEntry(
                        employee_id=employee_id,
                        entry_type=EntryType.AUTOMATIC,
                        user_id=self._api_user_id,
                        entry_date=week_starts[week],
                        duration=shortfall,
                        note=AUTO_ENTRY_NOTE,
                    ),
                    now=now,
                )
            elif existing.duration != shortfall:
                entry = self._entry_service.update_entry(
                    EntryUpdate.from_entry(existing, user_id=self._api_user_id, duration=shortfall),
                    now=now,
                )
            else:
                continue

            logger.info(
                "automatic entry for employee %s, pay period %s, week %s set to %s seconds",
                employee_id,
                pay_period_id,
                week,
                shortfall,
            )
            if entry is not None:
                written.append(entry)
        return written
