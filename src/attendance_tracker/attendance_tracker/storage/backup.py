"""Whole-store backups with checksum verification.

A backup file holds every collection plus metadata::

    {"timestamp": ..., "version": ..., "data": {...},
     "metadata": {"totalRecords": n, "dataSize": n, "checksum": sha256}}
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..core.constants import ALL_COLLECTIONS, BACKUP_VERSION, MAX_BACKUPS
from ..core.exceptions import StorageUnavailable, ValidationError
from .json_store import JsonFileStore

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup-"
BACKUP_SUFFIX = ".json"


@dataclass(frozen=True)
class BackupInfo:
    filename: str
    size: int
    records: int


@dataclass(frozen=True)
class RestoreInfo:
    timestamp: str
    records_restored: int


def calculate_checksum(data: Any) -> str:
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class BackupService:
    def __init__(self, store: JsonFileStore, backup_dir: str | Path, *, max_backups: int = MAX_BACKUPS):
        self._store = store
        self._backup_dir = Path(backup_dir)
        self._max_backups = int(max_backups)

    def list_backups(self) -> list[str]:
        if not self._backup_dir.exists():
            return []
        names = [
            p.name
            for p in self._backup_dir.iterdir()
            if p.is_file() and p.name.startswith(BACKUP_PREFIX) and p.name.endswith(BACKUP_SUFFIX)
        ]
        return sorted(names, reverse=True)

    def create_backup(self, *, now: Optional[datetime] = None) -> BackupInfo:
        now = now or now_local()
        stamp = now.strftime("%Y-%m-%dT%H-%M-%S-%f")
        data = {name: self._store.read(name) for name in ALL_COLLECTIONS}
        total = sum(len(records) for records in data.values())
        checksum = calculate_checksum(data)
        size = len(json.dumps(data, ensure_ascii=False))

        document = {
            "timestamp": stamp,
            "version": BACKUP_VERSION,
            "data": data,
            "metadata": {"totalRecords": total, "dataSize": size, "checksum": checksum},
        }

        filename = f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}"
        path = self._backup_dir / filename
        try:
            self._backup_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error("Failed to write backup %s: %s", path, e)
            raise StorageUnavailable("Cannot write backup file") from e

        self._clean_old_backups()
        logger.info("Backup created: %s (%d records)", filename, total)
        return BackupInfo(filename=filename, size=size, records=total)

    def restore_backup(self, filename: str) -> RestoreInfo:
        if Path(filename).name != filename or not filename.startswith(BACKUP_PREFIX):
            raise ValidationError("Invalid backup file name")

        path = self._backup_dir / filename
        if not path.is_file():
            raise ValidationError("Backup file not found")

        try:
            with path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except ValueError:
            raise ValidationError("Backup file is corrupted") from None
        except OSError as e:
            raise StorageUnavailable("Cannot read backup file") from e

        if not isinstance(document, dict):
            raise ValidationError("Backup file is corrupted")
        data = document.get("data")
        metadata = document.get("metadata")
        if not isinstance(data, dict) or not isinstance(metadata, dict):
            raise ValidationError("Backup file is corrupted")
        if calculate_checksum(data) != metadata.get("checksum"):
            raise ValidationError("Backup file is corrupted")

        restored = 0
        for name, records in data.items():
            if name not in ALL_COLLECTIONS or not isinstance(records, list):
                continue
            self._store.write(name, records)
            restored += len(records)

        logger.warning("Store restored from backup %s (%d records)", filename, restored)
        return RestoreInfo(timestamp=str(document.get("timestamp", "")), records_restored=restored)

    def _clean_old_backups(self) -> None:
        for name in self.list_backups()[self._max_backups:]:
            try:
                (self._backup_dir / name).unlink()
            except OSError as e:
                logger.warning("Could not delete old backup %s: %s", name, e)
