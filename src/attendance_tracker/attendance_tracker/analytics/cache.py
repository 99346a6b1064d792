from __future__ import annotations

import json
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from ..core.constants import ANALYTICS_CACHE_TTL_SECONDS


class AnalyticsCache:
    """TTL cache for computed analytics, owned by the analytics service.

    Two requests racing on the same cold key both compute and the last one
    wins; results are deterministic so that only costs time.
    """

    def __init__(self, ttl_seconds: float = ANALYTICS_CACHE_TTL_SECONDS, *, clock: Callable[[], float] = time.monotonic):
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(kind: str, options: Optional[dict]) -> str:
        return f"{kind}-{json.dumps(options or {}, sort_keys=True, default=str)}"

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self._ttl:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            expired = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self._ttl]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
