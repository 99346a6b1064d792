from __future__ import annotations

from typing import Protocol, Sequence


class DeviceRepository(Protocol):
    def list_all(self) -> Sequence[dict]:
        raise NotImplementedError
