from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Sequence, Tuple, TypeVar

from ..core.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonFileStore:
    """Named record collections, one JSON array file per collection.

    Writes go through a temp file + ``os.replace`` so readers never observe a
    half-written collection. ``update`` holds a per-collection lock for the
    whole read-modify-write cycle; instances are shared per data directory
    (``get_instance``) so every writer in the process uses the same locks.
    """

    _instances: Dict[Path, "JsonFileStore"] = {}
    _instances_lock = threading.Lock()

    def __init__(self, data_dir: str | Path):
        self._data_dir = Path(data_dir)
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @classmethod
    def get_instance(cls, data_dir: str | Path) -> "JsonFileStore":
        key = Path(data_dir).resolve()
        with cls._instances_lock:
            if key not in cls._instances:
                cls._instances[key] = JsonFileStore(key)
            return cls._instances[key]

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, name: str) -> Path:
        return self._data_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            return lock

    @contextmanager
    def locked(self, name: str) -> Iterator[None]:
        lock = self._lock_for(name)
        with lock:
            yield

    def read(self, name: str) -> List[Dict[str, Any]]:
        path = self.path_for(name)
        try:
            if not path.exists():
                return []
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to read collection %s from %s: %s", name, path, e)
            raise StorageUnavailable(f"Cannot read collection '{name}'") from e

        if not isinstance(data, list):
            logger.error("Collection %s in %s is not a JSON array", name, path)
            raise StorageUnavailable(f"Collection '{name}' is corrupted")
        return data

    def write(self, name: str, records: Sequence[Dict[str, Any]]) -> None:
        with self.locked(name):
            self._write_unlocked(name, records)

    def update(
        self,
        name: str,
        fn: Callable[[List[Dict[str, Any]]], Tuple[Sequence[Dict[str, Any]], T]],
    ) -> T:
        """Read-modify-write ``name`` as one serialized step.

        ``fn`` receives the current records and returns ``(new_records, result)``.
        """
        with self.locked(name):
            records = self.read(name)
            new_records, result = fn(records)
            self._write_unlocked(name, new_records)
            return result

    def _write_unlocked(self, name: str, records: Sequence[Dict[str, Any]]) -> None:
        path = self.path_for(name)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=self._data_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(list(records), f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error("Failed to write collection %s to %s: %s", name, path, e)
            raise StorageUnavailable(f"Cannot write collection '{name}'") from e
