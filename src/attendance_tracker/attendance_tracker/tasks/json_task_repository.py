from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import TASKS
from ..core.enums import TaskPriority, TaskStatus
from ..storage.json_store import JsonFileStore
from .model import Task
from .repository import TaskRepository


class JsonTaskRepository(TaskRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def list_all(self) -> Sequence[Task]:
        return [Task.from_record(r) for r in self._store.read(TASKS)]

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
        def do_create(records):
            task = Task(
                task_id=max((int(r.get("id", 0)) for r in records), default=0) + 1,
                title=title,
                description=description,
                assigned_to=assigned_to,
                assigned_by=assigned_by,
                priority=priority,
                status=status,
                due_date=due_date,
                created_at=created_at,
            )
            return [*records, task.to_record()], task

        return self._store.update(TASKS, do_create)
