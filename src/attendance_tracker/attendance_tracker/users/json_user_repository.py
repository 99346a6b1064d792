from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import USERS
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..storage.json_store import JsonFileStore
from .model import User
from .repository import UserRepository


class JsonUserRepository(UserRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def _records(self) -> list[dict]:
        # Entries without an id or username cannot be loaded as users.
        return [r for r in self._store.read(USERS) if isinstance(r, dict) and "id" in r and "username" in r]

    def _find(self, predicate) -> Optional[User]:
        for record in self._records():
            if predicate(record):
                return User.from_record(record)
        return None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._find(lambda r: r.get("id") == user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._find(lambda r: r.get("username") == username)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._find(lambda r: r.get("email") == email)

    def list_all(self) -> Sequence[User]:
        return [User.from_record(r) for r in self._records()]

    def create_user(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: Role,
        created_at: str,
    ) -> User:
        def do_create(records):
            users = [r for r in records if isinstance(r, dict)]
            # Re-checked under the collection lock.
            if any(r.get("username") == username or r.get("email") == email for r in users):
                raise ValidationError("User already exists")
            user = User(
                user_id=max((int(r.get("id", 0)) for r in users), default=0) + 1,
                username=username,
                email=email,
                password_hash=password_hash,
                role=role,
                created_at=created_at,
            )
            return [*records, user.to_record()], user

        return self._store.update(USERS, do_create)
