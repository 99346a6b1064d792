from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import TaskPriority, TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    title: str
    description: Optional[str]
    assigned_to: int
    assigned_by: int
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[str]
    created_at: str

    def to_record(self) -> dict:
        return {
            "id": self.task_id,
            "title": self.title,
            "description": self.description,
            "assignedTo": self.assigned_to,
            "assignedBy": self.assigned_by,
            "priority": self.priority.value,
            "status": self.status.value,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Task":
        return cls(
            task_id=int(record["id"]),
            title=str(record.get("title", "")),
            description=record.get("description"),
            assigned_to=int(record.get("assignedTo", 0)),
            assigned_by=int(record.get("assignedBy", 0)),
            priority=TaskPriority(record.get("priority", TaskPriority.MEDIUM.value)),
            status=TaskStatus(record.get("status", TaskStatus.PENDING.value)),
            due_date=record.get("dueDate"),
            created_at=str(record.get("createdAt", "")),
        )
