from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PayPeriod


class PayPeriodRepository(Protocol):
    def get_by_id(self, pay_period_id: int) -> Optional[PayPeriod]:
        raise NotImplementedError

    def list_all(self) -> Sequence[PayPeriod]:
        """Incomplete periods first, then newest start first."""

        raise NotImplementedError

    def get_for_date(self, when: datetime) -> Optional[PayPeriod]:
        raise NotImplementedError

    def get_bounds(self) -> Optional[tuple[datetime, datetime]]:
        """``(MAX(start_date), MAX(end_date))`` over all periods, or None when empty."""

        raise NotImplementedError

    def insert(self, *, start_date: datetime, end_date: datetime) -> int:
        raise NotImplementedError

    def mark_completed(self, pay_period_id: int) -> bool:
        raise NotImplementedError
