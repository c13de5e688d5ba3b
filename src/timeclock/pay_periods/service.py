from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local, start_of_day
from ..common.validators import require_id
from ..core.exceptions import LifecycleError, NotFoundError, wraps_errors
from ..core.rules import DEFAULT_RULES, ClockRules
from .model import PayPeriod
from .repository import PayPeriodRepository

logger = logging.getLogger(__name__)


class PayPeriodService:
    """Pay period lookups and the open -> completed lifecycle."""

    def __init__(self, periods: PayPeriodRepository, *, rules: ClockRules = DEFAULT_RULES):
        self._periods = periods
        self._rules = rules

    @wraps_errors("list_pay_periods")
    def list_periods(self, pay_period_id: Optional[int] = None) -> list[PayPeriod]:
        if pay_period_id:
            period = self._periods.get_by_id(require_id(pay_period_id, "pay period id"))
            return [period] if period else []
        return list(self._periods.list_all())

    @wraps_errors("load_pay_period")
    def get(self, pay_period_id: int) -> PayPeriod:
        period = self._periods.get_by_id(require_id(pay_period_id, "pay period id"))
        if not period:
            raise NotFoundError(f"Pay period {pay_period_id} not found")
        return period

    @wraps_errors("load_current_pay_period")
    def current(self, on: Optional[datetime] = None) -> Optional[PayPeriod]:
        return self._periods.get_for_date(on or now_local())

    @wraps_errors("mark_pay_period_completed")
    def mark_completed(self, pay_period_id: int, *, now: Optional[datetime] = None) -> PayPeriod:
        now = now or now_local()
        period = self.get(pay_period_id)
        if period.completed:
            raise LifecycleError(f"Pay period {period.pay_period_id} is already completed")
        if period.end_date > now:
            raise LifecycleError(f"Pay period {period.pay_period_id} has not ended yet")

        if not self._periods.mark_completed(period.pay_period_id):
            # Lost a race with another request completing it.
            raise LifecycleError(f"Pay period {period.pay_period_id} is already completed")
        logger.info("pay period %s marked completed", period.pay_period_id)
        return self.get(period.pay_period_id)

    def next_window(self, previous_end: datetime) -> tuple[datetime, datetime]:
        start = start_of_day(previous_end + timedelta(days=1))
        end = start + timedelta(days=self._rules.period_length_days) - timedelta(seconds=1)
        return start, end

    @wraps_errors("create_pay_periods")
    def generate_upcoming(self, *, now: Optional[datetime] = None) -> list[PayPeriod]:
        """Extend the calendar through the end of the current year.

        Stops after the first period starting next year, or after
        ``max_periods_per_run`` inserts.
        """
        now = now or now_local()
        bounds = self._periods.get_bounds()
        if bounds is None:
            logger.warning("no pay periods exist; seed the first one before generating")
            return []

        max_start, max_end = bounds
        current_year = now.year
        if max_start.year > current_year:
            return []

        created: list[PayPeriod] = []
        start, end = self.next_window(max_end)
        while True:
            pay_period_id = self._periods.insert(start_date=start, end_date=end)
            created.append(PayPeriod(pay_period_id=pay_period_id, start_date=start, end_date=end))
            if start.year > current_year or len(created) >= self._rules.max_periods_per_run:
                break
            start, end = self.next_window(end)

        if len(created) >= self._rules.max_periods_per_run and created[-1].start_date.year <= current_year:
            logger.warning("stopped after %s pay periods without reaching next year", len(created))
        logger.info(
            "created %s pay periods (%s .. %s)",
            len(created),
            created[0].start_date.date(),
            created[-1].end_date.date(),
        )
        return created
