from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, to_iso
from .model import ActivityLog
from .repository import ActivityLogRepository

logger = logging.getLogger(__name__)


class ActivityLogService:
    def __init__(self, logs: ActivityLogRepository):
        self._logs = logs

    def log_activity(
        self,
        type: str,
        description: str,
        *,
        user_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ActivityLog:
        entry = self._logs.append(
            type=type,
            description=description,
            user_id=user_id,
            timestamp=to_iso(now or now_local()),
            ip_address=ip_address,
        )
        logger.info("activity[%s] %s", type, description)
        return entry

    def list_logs(self) -> list[ActivityLog]:
        return list(self._logs.list_all())
