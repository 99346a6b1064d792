from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AnalyticsKind, WindowType
from ..ledger.model import AttendanceEvent


@dataclass
class ActionCounts:
    """Sign-in / sign-out counters for one bucket (day, user, window)."""

    sign_ins: int = 0
    sign_outs: int = 0

    @property
    def total(self) -> int:
        return self.sign_ins + self.sign_outs

    def add(self, event: AttendanceEvent) -> None:
        if event.is_sign_in:
            self.sign_ins += 1
        elif event.is_sign_out:
            self.sign_outs += 1

    def to_dict(self) -> dict:
        return {"signIns": self.sign_ins, "signOuts": self.sign_outs}


@dataclass(frozen=True)
class HourCount:
    hour: int
    count: int

    def to_dict(self) -> dict:
        return {"hour": self.hour, "count": self.count}


@dataclass(frozen=True)
class Anomaly:
    type: str
    message: str
    event: Optional[AttendanceEvent] = None
    hour: Optional[int] = None
    average_hour: Optional[float] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"type": self.type, "message": self.message}
        if self.event is not None:
            out["record"] = self.event.to_record()
        if self.hour is not None:
            out["hour"] = self.hour
        if self.average_hour is not None:
            out["averageHour"] = round(self.average_hour, 2)
        return out


@dataclass(frozen=True)
class ReportWindow:
    """Read-model for a report over one time window. Recomputed per request."""

    type: WindowType
    start: datetime
    end: datetime
    records: list[AttendanceEvent]
    sign_ins: int
    sign_outs: int
    excluded_records: int = 0

    @property
    def total_records(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "period": self.type.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "totalRecords": self.total_records,
            "signIns": self.sign_ins,
            "signOuts": self.sign_outs,
            "excludedRecords": self.excluded_records,
            "records": [r.to_record() for r in self.records],
        }


@dataclass(frozen=True)
class AnalyticsSnapshot:
    kind: AnalyticsKind
    generated_at: datetime
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "generatedAt": self.generated_at.isoformat(), **self.data}
