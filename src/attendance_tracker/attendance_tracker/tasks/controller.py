from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_identity, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/tasks", methods=["GET"], endpoint="tasks_list")
    @login_required
    def tasks_list():
        return jsonify([t.to_record() for t in container.task_service.list_tasks()])

    @app.route("/api/tasks", methods=["POST"], endpoint="tasks_create")
    @login_required
    def tasks_create():
        data = request.get_json(silent=True) or {}
        task = container.task_service.create_task(
            title=str(data.get("title", "")),
            description=data.get("description"),
            assigned_to=data.get("assignedTo"),
            assigned_by=current_identity().user_id,
            priority=str(data.get("priority") or "medium"),
            due_date=data.get("dueDate"),
        )
        return jsonify(task.to_record()), 201
