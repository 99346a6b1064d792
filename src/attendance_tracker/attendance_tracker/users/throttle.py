from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, Tuple

from ..core.constants import LOGIN_LOCKOUT_SECONDS, MAX_LOGIN_ATTEMPTS
from ..core.exceptions import AuthenticationError


class LoginThrottle:
    """Locks a login key out after too many consecutive failures."""

    def __init__(
        self,
        *,
        max_attempts: int = MAX_LOGIN_ATTEMPTS,
        lockout_seconds: float = LOGIN_LOCKOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_attempts = int(max_attempts)
        self._lockout_seconds = float(lockout_seconds)
        self._clock = clock
        self._attempts: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> None:
        with self._lock:
            count, last = self._attempts.get(key, (0, 0.0))
            elapsed = self._clock() - last
            if elapsed > self._lockout_seconds:
                self._attempts.pop(key, None)
                return
            if count >= self._max_attempts:
                minutes = math.ceil((self._lockout_seconds - elapsed) / 60)
                raise AuthenticationError(f"Too many attempts. Try again in {minutes} minutes.")

    def record_failure(self, key: str) -> None:
        with self._lock:
            count, last = self._attempts.get(key, (0, 0.0))
            now = self._clock()
            if now - last > self._lockout_seconds:
                count = 0
            self._attempts[key] = (count + 1, now)

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)
