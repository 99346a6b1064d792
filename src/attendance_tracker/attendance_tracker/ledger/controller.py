from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_identity, login_required
from ..container import Container

FEED_SIZE = 10


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def attendance_list():
        user_id = request.args.get("userId", type=int)
        limit = request.args.get("limit", type=int)
        events = container.attendance_service.list_events(user_id=user_id, limit=limit)
        return jsonify([e.to_record() for e in events])

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_record")
    @login_required
    def attendance_record():
        data = request.get_json(silent=True) or {}
        identity = current_identity()
        event = container.attendance_service.record_event(
            identity.user_id,
            identity.username,
            str(data.get("action", "")),
            location=data.get("location"),
            ip_address=request.remote_addr,
        )
        return jsonify(event.to_record()), 201

    @app.route("/api/attendance/feed", methods=["GET"], endpoint="attendance_feed")
    @login_required
    def attendance_feed():
        """Most recent events first (live activity feed)."""
        events = container.attendance_service.list_events(limit=FEED_SIZE)
        return jsonify([e.to_record() for e in reversed(events)])

    @app.route("/api/attendance/search", methods=["POST"], endpoint="attendance_search")
    @login_required
    def attendance_search():
        data = request.get_json(silent=True) or {}
        events = container.attendance_service.search_events(data.get("criteria", []))
        return jsonify([e.to_record() for e in events])
