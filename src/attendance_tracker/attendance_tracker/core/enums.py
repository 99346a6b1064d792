from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"


class AttendanceAction(str, Enum):
    SIGN_IN = "sign-in"
    SIGN_OUT = "sign-out"


class WindowType(str, Enum):
    """Time windows a report can be computed over."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class AnalyticsKind(str, Enum):
    ATTENDANCE = "attendance"
    USERS = "users"
    PRODUCTIVITY = "productivity"
    TRENDS = "trends"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
