from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ActivityLog:
    """Audit entry: who did what, when."""

    id: int
    type: str
    description: str
    user_id: Optional[int]
    timestamp: str
    ip_address: Optional[str] = None

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "userId": self.user_id,
            "timestamp": self.timestamp,
            "ipAddress": self.ip_address,
        }

    @classmethod
    def from_record(cls, record: dict) -> "ActivityLog":
        return cls(
            id=int(record["id"]),
            type=str(record.get("type", "")),
            description=str(record.get("description", "")),
            user_id=record.get("userId"),
            timestamp=str(record.get("timestamp", "")),
            ip_address=record.get("ipAddress"),
        )
