from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import current_identity, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/backups", methods=["GET"], endpoint="backups_list")
    @roles_required(Role.ADMIN)
    def backups_list():
        return jsonify(container.backup_service.list_backups())

    @app.route("/api/backups", methods=["POST"], endpoint="backups_create")
    @roles_required(Role.ADMIN)
    def backups_create():
        info = container.backup_service.create_backup()
        container.activity_service.log_activity(
            "backup",
            f"Backup {info.filename} created",
            user_id=current_identity().user_id,
        )
        return jsonify({"success": True, "filename": info.filename, "size": info.size, "records": info.records}), 201

    @app.route("/api/backups/<filename>/restore", methods=["POST"], endpoint="backups_restore")
    @roles_required(Role.ADMIN)
    def backups_restore(filename: str):
        info = container.backup_service.restore_backup(filename)
        container.analytics_service.clear_cache()
        return jsonify({"success": True, "timestamp": info.timestamp, "recordsRestored": info.records_restored})
