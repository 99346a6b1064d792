"""Create missing collection files and seed demo users."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.storage.bootstrap import (
    collection_sizes,
    ensure_collections,
    ensure_default_users,
)
from src.attendance_tracker.attendance_tracker.storage.json_store import JsonFileStore


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    store = JsonFileStore.get_instance(settings.DATA_DIR)

    created = ensure_collections(store)
    seeded = ensure_default_users(store)
    sizes = ", ".join(f"{name}={count}" for name, count in collection_sizes(store).items())
    print(f"OK: data dir {store.data_dir} (created={created or '-'}, seeded users={seeded}; {sizes})")


if __name__ == "__main__":
    main()
