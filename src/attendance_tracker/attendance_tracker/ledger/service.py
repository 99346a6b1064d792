from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..activity.service import ActivityLogService
from ..common.datetime_utils import to_iso
from ..common.search import compile_criteria
from ..core.constants import DEFAULT_LOCATION
from ..core.enums import AttendanceAction
from ..core.exceptions import InvalidAction, StorageUnavailable
from .model import AttendanceEvent
from .repository import EventStore

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: record sign-in/sign-out events and read the ledger back."""

    def __init__(self, events: EventStore, activity: Optional[ActivityLogService] = None):
        self._events = events
        self._activity = activity

    def record_event(
        self,
        user_id: int,
        username: str,
        action: str,
        *,
        location: Optional[str] = None,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceEvent:
        try:
            action = AttendanceAction(action).value
        except ValueError:
            allowed = ", ".join(a.value for a in AttendanceAction)
            raise InvalidAction(f"Invalid action {action!r}; expected one of: {allowed}") from None

        event = AttendanceEvent(
            id=None,
            user_id=int(user_id),
            username=username,
            action=action,
            timestamp=to_iso(now) if now else None,
            location=(location or "").strip() or DEFAULT_LOCATION,
        )
        stored = self._events.append(event)

        if self._activity:
            try:
                self._activity.log_activity(
                    "attendance",
                    f"{username} {action}",
                    user_id=stored.user_id,
                    ip_address=ip_address,
                    now=now,
                )
            except StorageUnavailable as e:
                logger.warning("Attendance event %s recorded but activity log failed: %s", stored.id, e)

        return stored

    def list_events(self, *, user_id: Optional[int] = None, limit: Optional[int] = None) -> list[AttendanceEvent]:
        events = list(self._events.fetch_all())
        if user_id is not None:
            events = [e for e in events if e.user_id == user_id]
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    def search_events(self, criteria: Sequence[Mapping[str, Any]]) -> list[AttendanceEvent]:
        """Events whose stored record matches every criterion, in insertion order."""
        matches = compile_criteria(criteria)
        return [e for e in self._events.fetch_all() if matches(e.to_record())]
