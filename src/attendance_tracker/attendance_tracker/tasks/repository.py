from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import TaskPriority, TaskStatus
from .model import Task


class TaskRepository(Protocol):
    def list_all(self) -> Sequence[Task]:
        raise NotImplementedError

    def create_task(
        self,
        *,
        title: str,
        description: Optional[str],
        assigned_to: int,
        assigned_by: int,
        priority: TaskPriority,
        status: TaskStatus,
        due_date: Optional[str],
        created_at: str,
    ) -> Task:
        raise NotImplementedError
