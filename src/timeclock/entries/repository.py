from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import ActionFlag, EntryType
from .model import Entry, EntryAction


class EntryRepository(Protocol):
    """Entry table access.

    Entries come back undecorated (no actions, no errors); ``week`` is derived
    from the owning pay period's start.
    """

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
        raise NotImplementedError

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
        raise NotImplementedError

    def get_entries(self, employee_id: int, entry_ids: Sequence[int]) -> Sequence[Entry]:
        raise NotImplementedError

    def list_for_pay_period(self, employee_id: int, pay_period_id: int) -> Sequence[Entry]:
        raise NotImplementedError

    def find_latest_open_entry_id(self, employee_id: int, entry_type: EntryType, *, now: datetime) -> Optional[int]:
        """Latest non-deleted entry dated before ``now`` inside the started, incomplete periods."""
        raise NotImplementedError

    def mark_deleted(self, *, entry_id: int, deleted_by: int, note: str) -> bool:
        raise NotImplementedError

    def set_employee_approval(
        self,
        *,
        employee_id: int,
        pay_period_id: int,
        approved: bool,
        approval_time: Optional[datetime],
    ) -> int:
        raise NotImplementedError

    def set_supervisor_approval(
        self,
        *,
        employee_id: int,
        pay_period_id: int,
        approved: bool,
        approved_by: Optional[int],
        approval_time: Optional[datetime],
    ) -> int:
        raise NotImplementedError


class ActionRepository(Protocol):
    """Append-only action log: rows are inserted and read, never changed."""

    def insert_action(
        self,
        *,
        entry_id: int,
        flags: ActionFlag,
        action_time: datetime,
        ip: str,
        notes: dict[str, Any],
    ) -> int:
        raise NotImplementedError

    def get_action(self, action_id: int) -> Optional[EntryAction]:
        raise NotImplementedError

    def list_for_entries(self, entry_ids: Sequence[int]) -> Sequence[EntryAction]:
        raise NotImplementedError
