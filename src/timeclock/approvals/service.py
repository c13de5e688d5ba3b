from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_id
from ..core.exceptions import wraps_errors
from ..entries.repository import EntryRepository

logger = logging.getLogger(__name__)


class ApprovalService:
    """Period-wide sign-off for one employee.

    Approval is never granted per entry: each call rewrites every entry the
    employee has in the pay period, so repeating a call is harmless.
    """

    def __init__(self, entries: EntryRepository):
        self._entries = entries

    @wraps_errors("employee_approve_entries")
    def set_employee_approval(
        self,
        employee_id: int,
        pay_period_id: int,
        approved: bool,
        *,
        now: Optional[datetime] = None,
    ) -> int:
        approved = bool(approved)
        updated = self._entries.set_employee_approval(
            employee_id=require_id(employee_id, "employee id"),
            pay_period_id=require_id(pay_period_id, "pay period id"),
            approved=approved,
            approval_time=(now or now_local()) if approved else None,
        )
        logger.info(
            "employee approval %s for employee %s, pay period %s (%s entries)",
            "set" if approved else "cleared",
            employee_id,
            pay_period_id,
            updated,
        )
        return updated

    @wraps_errors("supervisor_approve_entries")
    def set_supervisor_approval(
        self,
        employee_id: int,
        pay_period_id: int,
        approver_id: Optional[int],
        approved: bool,
        *,
        now: Optional[datetime] = None,
    ) -> int:
        approved = bool(approved)
        updated = self._entries.set_supervisor_approval(
            employee_id=require_id(employee_id, "employee id"),
            pay_period_id=require_id(pay_period_id, "pay period id"),
            approved=approved,
            approved_by=require_id(approver_id, "approver id") if approved else None,
            approval_time=(now or now_local()) if approved else None,
        )
        logger.info(
            "supervisor approval %s for employee %s, pay period %s by %s (%s entries)",
            "set" if approved else "cleared",
            employee_id,
            pay_period_id,
            approver_id,
            updated,
        )
        return updated

    def reset(self, employee_id: int, pay_period_id: int) -> None:
        """Withdraw both sign-offs after payable content changed."""
        self.set_employee_approval(employee_id, pay_period_id, False)
        self.set_supervisor_approval(employee_id, pay_period_id, None, False)
