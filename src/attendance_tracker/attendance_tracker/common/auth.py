from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Authenticated actor taken from the Flask session."""

    user_id: int
    username: str
    role: Role


def current_identity() -> Optional[Identity]:
    if "user_id" not in session:
        return None
    return Identity(
        user_id=int(session["user_id"]),
        username=str(session.get("username", "")),
        role=Role(session.get("role", Role.EMPLOYEE.value)),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Authentication required"}), 401
            if session.get("role") not in allowed:
                return jsonify({"success": False, "message": "Access denied"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
