from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import PayPeriod
from .repository import PayPeriodRepository

_SELECT = "SELECT pay_period_id, start_date, end_date, completed FROM pay_periods"


def _to_period(r: dict) -> PayPeriod:
    return PayPeriod(
        pay_period_id=int(r["pay_period_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        completed=as_bool(r.get("completed")),
    )


class MySQLPayPeriodRepository(PayPeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, pay_period_id: int) -> Optional[PayPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE pay_period_id=%s", (int(pay_period_id),))
            r = fetchone(cur)
            return _to_period(r) if r else None

    def list_all(self) -> Sequence[PayPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY completed, start_date DESC")
            return [_to_period(r) for r in fetchall(cur)]

    def get_for_date(self, when: datetime) -> Optional[PayPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE %s BETWEEN start_date AND end_date LIMIT 1", (when,))
            r = fetchone(cur)
            return _to_period(r) if r else None

    def get_bounds(self) -> Optional[tuple[datetime, datetime]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT MAX(start_date) AS max_start, MAX(end_date) AS max_end FROM pay_periods")
            r = fetchone(cur)
            if not r or r.get("max_start") is None:
                return None
            return r["max_start"], r["max_end"]

    def insert(self, *, start_date: datetime, end_date: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO pay_periods(start_date, end_date) VALUES(%s,%s)",
                (start_date, end_date),
            )
            return int(cur.lastrowid)

    def mark_completed(self, pay_period_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE pay_periods SET completed=1 WHERE pay_period_id=%s AND completed=0",
                (int(pay_period_id),),
            )
            return cur.rowcount > 0
