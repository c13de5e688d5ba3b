from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_optional_int, db_cursor, fetchall, fetchone, placeholders
from .model import Entry
from .repository import EntryRepository

_COLUMNS = """
    e.entry_id, e.employee_id, e.entry_type, e.user_id, e.entry_date, e.duration, e.note,
    e.employee_approved, e.employee_approval_time,
    e.approved, e.approval_time, e.approved_by,
    e.deleted, e.deleted_by,
    pp.pay_period_id,
    IF(e.entry_date >= DATE_ADD(pp.start_date, INTERVAL 7 DAY), 1, 0) AS week,
    e.created_at
"""


def _to_entry(r: dict) -> Entry:
    return Entry(
        entry_id=int(r["entry_id"]),
        employee_id=int(r["employee_id"]),
        entry_type=EntryType(int(r["entry_type"])),
        user_id=int(r.get("user_id") or 0),
        entry_date=r["entry_date"],
        duration=int(r.get("duration") or 0),
        note=r.get("note") or "",
        employee_approved=as_bool(r.get("employee_approved")),
        employee_approval_time=r.get("employee_approval_time"),
        approved=as_bool(r.get("approved")),
        approval_time=r.get("approval_time"),
        approved_by=as_optional_int(r.get("approved_by")),
        deleted=as_bool(r.get("deleted")),
        deleted_by=as_optional_int(r.get("deleted_by")),
        pay_period_id=as_optional_int(r.get("pay_period_id")),
        week=int(r.get("week") or 0),
        created_at=r.get("created_at"),
    )


class MySQLEntryRepository(EntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_entry(
        self,
        *,
        employee_id: int,
        entry_type: EntryType,
        user_id: int,
        entry_date: datetime,
        duration: int,
        note: str,
        pay_period_id: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO entries(employee_id, entry_type, user_id, entry_date, duration, note, pay_period_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), int(entry_type), int(user_id or 0), entry_date, int(duration), note or "", pay_period_id),
            )
            return int(cur.lastrowid)

    def update_entry(
        self,
        *,
        entry_id: int,
        entry_type: EntryType,
        user_id: int,
        entry_date: datetime,
        duration: int,
        note: str,
        pay_period_id: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE entries
                SET entry_type=%s, user_id=%s, entry_date=%s, duration=%s, note=%s, pay_period_id=%s
                WHERE entry_id=%s
                """,
                (int(entry_type), int(user_id or 0), entry_date, int(duration), note or "", pay_period_id, int(entry_id)),
            )
            return cur.rowcount > 0

    def get_entries(self, employee_id: int, entry_ids: Sequence[int]) -> Sequence[Entry]:
        ids = [int(i) for i in entry_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM entries e
                LEFT JOIN pay_periods pp ON e.entry_date BETWEEN pp.start_date AND pp.end_date
                WHERE e.employee_id=%s AND e.entry_id IN ({placeholders(ids)})
                ORDER BY e.entry_date, e.entry_type
                """,
                (int(employee_id), *ids),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_pay_period(self, employee_id: int, pay_period_id: int) -> Sequence[Entry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM entries e
                INNER JOIN pay_periods pp
                    ON pp.pay_period_id=%s AND e.entry_date BETWEEN pp.start_date AND pp.end_date
                WHERE e.employee_id=%s
                ORDER BY e.entry_date, e.entry_type
                """,
                (int(pay_period_id), int(employee_id)),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def find_latest_open_entry_id(self, employee_id: int, entry_type: EntryType, *, now: datetime) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.entry_id
                FROM entries e
                INNER JOIN (
                    SELECT MIN(start_date) AS start_date, MAX(end_date) AS end_date
                    FROM pay_periods
                    WHERE completed = 0 AND start_date < %s
                ) open_periods ON e.entry_date BETWEEN open_periods.start_date AND open_periods.end_date
                WHERE e.deleted = 0
                  AND e.employee_id = %s
                  AND e.entry_type = %s
                  AND e.entry_date < %s
                ORDER BY e.entry_date DESC, e.entry_id DESC
                LIMIT 1
                """,
                (now, int(employee_id), int(entry_type), now),
            )
            r = fetchone(cur)
            return int(r["entry_id"]) if r else None

    def mark_deleted(self, *, entry_id: int, deleted_by: int, note: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE entries SET deleted=1, deleted_by=%s, note=%s WHERE entry_id=%s",
                (int(deleted_by or 0), note or "", int(entry_id)),
            )
            return cur.rowcount > 0

    def set_employee_approval(
        self,
        *,
        employee_id: int,
        pay_period_id: int,
        approved: bool,
        approval_time: Optional[datetime],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE entries
                SET employee_approved=%s, employee_approval_time=%s
                WHERE employee_id=%s AND pay_period_id=%s
                """,
                (1 if approved else 0, approval_time, int(employee_id), int(pay_period_id)),
            )
            return int(cur.rowcount)

    def set_supervisor_approval(
        self,
        *,
        employee_id: int,
        pay_period_id: int,
        approved: bool,
        approved_by: Optional[int],
        approval_time: Optional[datetime],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE entries
                SET approved=%s, approval_time=%s, approved_by=%s
                WHERE employee_id=%s AND pay_period_id=%s
                """,
                (1 if approved else 0, approval_time, approved_by, int(employee_id), int(pay_period_id)),
            )
            return int(cur.rowcount)
