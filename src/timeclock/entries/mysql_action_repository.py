from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import ActionFlag
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import EntryAction
from .repository import ActionRepository

_SELECT = """
    SELECT action_id, entry_id, action_type, action_time, ip, notes, created_at
    FROM entry_actions
"""


def _decode_notes(value: Any) -> dict:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value or "{}")
    return dict(value or {})


def _to_action(r: dict) -> EntryAction:
    return EntryAction(
        action_id=int(r["action_id"]),
        entry_id=int(r["entry_id"]),
        flags=ActionFlag(int(r["action_type"])),
        action_time=r["action_time"],
        ip=r.get("ip") or "",
        notes=_decode_notes(r.get("notes")),
        created_at=r.get("created_at"),
    )


class MySQLActionRepository(ActionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_action(
        self,
        *,
        entry_id: int,
        flags: ActionFlag,
        action_time: datetime,
        ip: str,
        notes: dict[str, Any],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO entry_actions(entry_id, action_type, action_time, ip, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(entry_id), flags.value, action_time, ip or "", json.dumps(notes or {}, default=str)),
            )
            return int(cur.lastrowid)

    def get_action(self, action_id: int) -> Optional[EntryAction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE action_id=%s", (int(action_id),))
            r = fetchone(cur)
            return _to_action(r) if r else None

    def list_for_entries(self, entry_ids: Sequence[int]) -> Sequence[EntryAction]:
        ids = [int(i) for i in entry_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE entry_id IN ({placeholders(ids)}) ORDER BY action_id",
                tuple(ids),
            )
            return [_to_action(r) for r in fetchall(cur)]
