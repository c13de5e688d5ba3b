from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class PayPeriod:
    """Two-week billing window. ``end_date`` is the last second of day 14."""

    pay_period_id: int
    start_date: datetime
    end_date: datetime
    completed: bool = False

    @property
    def week2_start_date(self) -> datetime:
        return self.start_date + timedelta(days=7)

    def contains(self, when: datetime) -> bool:
        return self.start_date <= when <= self.end_date

    def week_index(self, when: datetime) -> int:
        return 1 if when >= self.week2_start_date else 0

    def to_dict(self) -> dict:
        return {
            "id": self.pay_period_id,
            "start_date": self.start_date.isoformat(),
            "week2_start_date": self.week2_start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "completed": self.completed,
        }
