from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Callable, Sequence

from ..common.datetime_utils import now_local, to_iso
from ..core.constants import ATTENDANCE
from ..core.exceptions import ValidationError
from ..storage.json_store import JsonFileStore
from .model import AttendanceEvent, _as_int
from .repository import EventStore

logger = logging.getLogger(__name__)


class JsonEventStore(EventStore):
    """Ledger kept in the ``attendance`` collection.

    Ids are creation-time derived (epoch milliseconds) but always strictly
    greater than every stored id, so two appends in the same millisecond
    still get distinct, increasing ids.
    """

    def __init__(self, store: JsonFileStore, *, clock: Callable[[], datetime] = now_local):
        self._store = store
        self._clock = clock

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        def do_append(records):
            now = self._clock()
            ids = [_as_int(r.get("id")) for r in records if isinstance(r, dict)]
            last_id = max((i for i in ids if i is not None), default=0)

            event_id = event.id
            if event_id is None:
                event_id = max(int(now.timestamp() * 1000), last_id + 1)
            elif event_id in ids:
                raise ValidationError(f"Attendance event {event_id} already exists")

            stored = dataclasses.replace(
                event,
                id=event_id,
                timestamp=event.timestamp or to_iso(now),
            )
            return [*records, stored.to_record()], stored

        stored = self._store.update(ATTENDANCE, do_append)
        logger.debug("Appended attendance event %s (%s %s)", stored.id, stored.username, stored.action)
        return stored

    def fetch_all(self) -> Sequence[AttendanceEvent]:
        return [AttendanceEvent.from_record(r) for r in self._store.read(ATTENDANCE)]
