from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local, to_iso
from ..common.validators import (
    EMAIL_PATTERN,
    USERNAME_PATTERN,
    require_choice,
    require_max_length,
    require_min_length,
    require_non_empty,
    require_pattern,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import User
from .repository import UserRepository
from .throttle import LoginThrottle


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, throttle: Optional[LoginThrottle] = None):
        self._users = users
        self._throttle = throttle if throttle is not None else LoginThrottle()

    def authenticate(self, username: str, password: str, *, identifier: str = "") -> SessionUser:
        key = f"{identifier}-{username}"
        self._throttle.check(key)

        user = self._users.get_by_username(username)
        ok = False
        if user and user.is_active:
            try:
                ok = check_password_hash(user.password_hash, password or "")
            except (TypeError, ValueError):
                # e.g. placeholder or corrupted hashes
                ok = False

        if not ok:
            self._throttle.record_failure(key)
            raise AuthenticationError("Invalid credentials")

        self._throttle.reset(key)
        return SessionUser(user_id=user.user_id, username=user.username, role=user.role)


class UserService:
    """Use case: register and list users."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(
        self,
        *,
        username: str,
        email: str,
        password: str,
        role: str = Role.EMPLOYEE.value,
        now: Optional[datetime] = None,
    ) -> User:
        username = require_non_empty(username, "username")
        require_min_length(username, "username", 3)
        require_max_length(username, "username", 50)
        require_pattern(username, "username", USERNAME_PATTERN)

        email = require_non_empty(email, "email")
        require_pattern(email, "email", EMAIL_PATTERN)

        require_min_length(password, "password", 6)
        require_choice(role, "role", [r.value for r in Role])

        if self._users.get_by_username(username) or self._users.get_by_email(email):
            raise ValidationError("User already exists")

        return self._users.create_user(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role),
            created_at=to_iso(now or now_local()),
        )

    def list_users(self) -> list[dict]:
        return [u.to_public() for u in self._users.list_all()]

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get_by_id(user_id)
