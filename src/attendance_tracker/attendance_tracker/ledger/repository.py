from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceEvent


class EventStore(Protocol):
    """Append-only ledger of attendance events."""

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        """Record ``event`` at the end of the ledger, assigning id/timestamp if absent."""

        raise NotImplementedError

    def fetch_all(self) -> Sequence[AttendanceEvent]:
        """All events in insertion order."""

        raise NotImplementedError
