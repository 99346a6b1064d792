from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.main import create_app
from src.attendance_tracker.attendance_tracker.storage.json_store import JsonFileStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def store(tmp_path) -> JsonFileStore:
    return JsonFileStore.get_instance(tmp_path / "database")


@pytest.fixture
def make_app(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    def _make(**overrides):
        config = {
            "DATA_DIR": str(tmp_path / "database"),
            "BACKUP_DIR": str(tmp_path / "backups"),
            "AUTO_INIT_DATA": True,
            "AUTO_SEED_DATA": True,
        }
        config.update(overrides)
        return create_app(config)

    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(username: str = "admin", password: str = "admin123"):
        return client.post("/api/login", json={"username": username, "password": password})

    return _login
