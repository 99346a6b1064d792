from __future__ import annotations

from typing import Sequence

from ..core.constants import DEVICES
from ..storage.json_store import JsonFileStore
from .repository import DeviceRepository


class JsonDeviceRepository(DeviceRepository):
    """Registered attendance devices. Records are free-form and read-only here."""

    def __init__(self, store: JsonFileStore):
        self._store = store

    def list_all(self) -> Sequence[dict]:
        return [r for r in self._store.read(DEVICES) if isinstance(r, dict)]
