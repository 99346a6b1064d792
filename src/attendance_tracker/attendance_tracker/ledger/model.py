from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import parse_timestamp
from ..core.constants import DEFAULT_LOCATION
from ..core.enums import AttendanceAction
from ..core.exceptions import InvalidRecord


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: a single sign-in or sign-out.

    ``timestamp`` is kept exactly as persisted (ISO-8601). ``username`` is the
    label captured when the event was recorded and is never rewritten.
    """

    id: Optional[int]
    user_id: Optional[int]
    username: str
    action: str
    timestamp: Optional[str]
    location: str = DEFAULT_LOCATION

    @property
    def occurred_at(self) -> datetime:
        if not self.timestamp:
            raise InvalidRecord("Missing timestamp", record_id=self.id)
        try:
            return parse_timestamp(self.timestamp)
        except (TypeError, ValueError):
            raise InvalidRecord(f"Unparseable timestamp {self.timestamp!r}", record_id=self.id) from None

    @property
    def is_sign_in(self) -> bool:
        return self.action == AttendanceAction.SIGN_IN.value

    @property
    def is_sign_out(self) -> bool:
        return self.action == AttendanceAction.SIGN_OUT.value

    @classmethod
    def from_record(cls, record: Any) -> "AttendanceEvent":
        """Build from a stored record without ever raising.

        Malformed values are carried through and surface later as InvalidRecord.
        """
        if not isinstance(record, dict):
            record = {}
        timestamp = record.get("timestamp")
        return cls(
            id=_as_int(record.get("id")),
            user_id=_as_int(record.get("userId")),
            username=str(record.get("username") or ""),
            action=str(record.get("action") or ""),
            timestamp=timestamp if isinstance(timestamp, str) else None,
            location=str(record.get("location") or DEFAULT_LOCATION),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "username": self.username,
            "action": self.action,
            "timestamp": self.timestamp,
            "location": self.location,
        }
