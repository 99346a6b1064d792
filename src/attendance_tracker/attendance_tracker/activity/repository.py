from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ActivityLog


class ActivityLogRepository(Protocol):
    def append(
        self,
        *,
        type: str,
        description: str,
        user_id: Optional[int],
        timestamp: str,
        ip_address: Optional[str],
    ) -> ActivityLog:
        raise NotImplementedError

    def list_all(self) -> Sequence[ActivityLog]:
        raise NotImplementedError
