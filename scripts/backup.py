"""Backup the JSON data store.

Note: Run from cron for periodic backups; the service keeps the newest
MAX_BACKUPS files and deletes older ones.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.core.exceptions import StorageUnavailable
from src.attendance_tracker.attendance_tracker.storage.backup import BackupService
from src.attendance_tracker.attendance_tracker.storage.json_store import JsonFileStore


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    store = JsonFileStore.get_instance(settings.DATA_DIR)
    service = BackupService(store, settings.BACKUP_DIR, max_backups=getattr(settings, "MAX_BACKUPS", 24))

    try:
        info = service.create_backup()
    except StorageUnavailable as e:
        raise SystemExit(f"Backup failed: {e}")
    print(f"OK: Backup created: {info.filename} ({info.records} records, {info.size} bytes)")


if __name__ == "__main__":
    main()
