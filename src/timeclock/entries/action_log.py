from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import ActionFlag
from ..core.exceptions import wraps_errors
from .model import EntryAction
from .repository import ActionRepository

logger = logging.getLogger(__name__)


class ActionLog:
    """Append-only history of clock events per entry."""

    def __init__(self, actions: ActionRepository):
        self._actions = actions

    @wraps_errors("append_action")
    def append(
        self,
        entry_id: int,
        flags: ActionFlag,
        action_time: datetime,
        ip: str = "",
        notes: Optional[dict[str, Any]] = None,
    ) -> EntryAction:
        action_id = self._actions.insert_action(
            entry_id=int(entry_id),
            flags=flags,
            action_time=action_time,
            ip=ip or "",
            notes=dict(notes or {}),
        )
        logger.info("action %s appended to entry %s (%s)", action_id, entry_id, flags)
        action = self._actions.get_action(action_id)
        if action is None:
            # Written but not readable back; return what was stored.
            logger.warning("action %s not found after insert", action_id)
            return EntryAction(
                action_id=action_id,
                entry_id=int(entry_id),
                flags=flags,
                action_time=action_time,
                ip=ip or "",
                notes=dict(notes or {}),
            )
        return action

    @wraps_errors("list_actions")
    def list_for_entries(self, entry_ids: Sequence[int]) -> list[EntryAction]:
        ids = [int(i) for i in entry_ids if i]
        if not ids:
            return []
        return sorted(self._actions.list_for_entries(ids), key=lambda a: a.action_id)
