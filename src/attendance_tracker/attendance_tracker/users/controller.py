from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.auth import current_identity, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        username = str(data.get("username", ""))
        password = str(data.get("password", ""))

        s_user = container.auth_service.authenticate(username, password, identifier=request.remote_addr or "")

        session.clear()
        session["user_id"] = s_user.user_id
        session["username"] = s_user.username
        session["role"] = s_user.role.value

        container.activity_service.log_activity(
            "login",
            f"User {s_user.username} logged in",
            user_id=s_user.user_id,
            ip_address=request.remote_addr,
        )
        user = container.user_service.get_user(s_user.user_id)
        return jsonify({"success": True, "user": user.to_public() if user else None})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/register", methods=["POST"], endpoint="register")
    def register_user():
        data = request.get_json(silent=True) or {}
        user = container.user_service.register(
            username=str(data.get("username", "")),
            email=str(data.get("email", "")),
            password=str(data.get("password", "")),
            role=str(data.get("role") or "employee"),
        )
        return jsonify({"success": True, "user": user.to_public()}), 201

    @app.route("/api/users", methods=["GET"], endpoint="users")
    @login_required
    def users():
        return jsonify(container.user_service.list_users())

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        identity = current_identity()
        user = container.user_service.get_user(identity.user_id)
        return jsonify(user.to_public() if user else None)
