from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/devices", methods=["GET"], endpoint="devices_list")
    @login_required
    def devices_list():
        return jsonify(list(container.devices_repo.list_all()))
