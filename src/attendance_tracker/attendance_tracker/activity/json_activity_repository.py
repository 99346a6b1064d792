from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import LOGS
from ..storage.json_store import JsonFileStore
from .model import ActivityLog
from .repository import ActivityLogRepository


class JsonActivityLogRepository(ActivityLogRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def append(
        self,
        *,
        type: str,
        description: str,
        user_id: Optional[int],
        timestamp: str,
        ip_address: Optional[str],
    ) -> ActivityLog:
        def do_append(records):
            last_id = max((int(r.get("id", 0)) for r in records), default=0)
            log = ActivityLog(
                id=last_id + 1,
                type=type,
                description=description,
                user_id=user_id,
                timestamp=timestamp,
                ip_address=ip_address,
            )
            return [*records, log.to_record()], log

        return self._store.update(LOGS, do_append)

    def list_all(self) -> Sequence[ActivityLog]:
        return [ActivityLog.from_record(r) for r in self._store.read(LOGS)]
