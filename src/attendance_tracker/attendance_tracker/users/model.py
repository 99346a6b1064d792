from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no storage access). ``password_hash`` never
    leaves the service layer; use ``to_public`` for responses.
    """

    user_id: int
    username: str
    email: str
    password_hash: str
    role: Role
    mfa_enabled: bool = False
    is_active: bool = True
    created_at: Optional[str] = None

    def to_public(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "mfaEnabled": self.mfa_enabled,
            "isActive": self.is_active,
            "createdAt": self.created_at,
        }

    def to_record(self) -> dict:
        return {**self.to_public(), "password": self.password_hash}

    @classmethod
    def from_record(cls, record: dict) -> "User":
        return cls(
            user_id=int(record["id"]),
            username=str(record["username"]),
            email=str(record.get("email", "")),
            password_hash=str(record.get("password", "")),
            role=Role(record.get("role", Role.EMPLOYEE.value)),
            mfa_enabled=bool(record.get("mfaEnabled", False)),
            is_active=bool(record.get("isActive", True)),
            created_at=record.get("createdAt"),
        )
