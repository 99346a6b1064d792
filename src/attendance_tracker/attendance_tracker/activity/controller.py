from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/logs", methods=["GET"], endpoint="logs_list")
    @roles_required(Role.ADMIN)
    def logs_list():
        return jsonify([log.to_record() for log in container.activity_service.list_logs()])
