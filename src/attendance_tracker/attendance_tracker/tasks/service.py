from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, parse_iso_date, to_iso
from ..common.validators import require_choice, require_int, require_max_length, require_min_length, require_non_empty
from ..core.enums import TaskPriority, TaskStatus
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .model import Task
from .repository import TaskRepository


class TaskService:
    def __init__(self, tasks: TaskRepository, users: Optional[UserRepository] = None):
        self._tasks = tasks
        self._users = users

    def create_task(
        self,
        *,
        title: str,
        assigned_to,
        assigned_by: int,
        description: Optional[str] = None,
        priority: str = TaskPriority.MEDIUM.value,
        due_date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Task:
        title = require_non_empty(title, "title")
        require_min_length(title, "title", 3)
        require_max_length(title, "title", 200)
        require_max_length(description, "description", 1000)
        assigned_to = require_int(assigned_to, "assignedTo")
        require_choice(priority or TaskPriority.MEDIUM.value, "priority", [p.value for p in TaskPriority])

        if self._users and not self._users.get_by_id(assigned_to):
            raise ValidationError("Assigned user does not exist")

        if due_date:
            try:
                due_date = parse_iso_date(due_date).isoformat()
            except (TypeError, ValueError):
                raise ValidationError("dueDate must be a valid date") from None

        return self._tasks.create_task(
            title=title,
            description=description or None,
            assigned_to=assigned_to,
            assigned_by=int(assigned_by),
            priority=TaskPriority(priority or TaskPriority.MEDIUM.value),
            status=TaskStatus.PENDING,
            due_date=due_date or None,
            created_at=to_iso(now or now_local()),
        )

    def list_tasks(self) -> list[Task]:
        return list(self._tasks.list_all())
