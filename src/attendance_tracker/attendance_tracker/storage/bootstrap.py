from __future__ import annotations

from datetime import datetime
from typing import Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local, to_iso
from ..core.constants import ALL_COLLECTIONS, USERS
from ..core.enums import Role
from .json_store import JsonFileStore

DEMO_USERS = (
    ("admin", "admin@company.com", "admin123", Role.ADMIN, True),
    ("supervisor1", "supervisor@company.com", "super123", Role.SUPERVISOR, False),
    ("employee1", "employee@company.com", "emp123", Role.EMPLOYEE, False),
)


def ensure_collections(store: JsonFileStore) -> list[str]:
    """Create empty collection files that do not exist yet. Returns the created names."""
    created = []
    for name in ALL_COLLECTIONS:
        if not store.exists(name):
            store.write(name, [])
            created.append(name)
    return created


def ensure_default_users(store: JsonFileStore, *, now: Optional[datetime] = None) -> int:
    """Seed demo accounts when the users collection is empty. Returns how many were added."""
    created_at = to_iso(now or now_local())

    def seed(records):
        if records:
            return records, 0
        users = [
            {
                "id": i,
                "username": username,
                "email": email,
                "password": generate_password_hash(password),
                "role": role.value,
                "mfaEnabled": mfa,
                "isActive": True,
                "createdAt": created_at,
            }
            for i, (username, email, password, role, mfa) in enumerate(DEMO_USERS, start=1)
        ]
        return users, len(users)

    return store.update(USERS, seed)


def collection_sizes(store: JsonFileStore) -> dict[str, int]:
    return {name: len(store.read(name)) for name in ALL_COLLECTIONS}
