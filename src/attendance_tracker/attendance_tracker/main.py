from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .activity.controller import register as register_activity
from .container import build_container
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    StorageUnavailable,
)
from .devices.controller import register as register_devices
from .ledger.controller import register as register_attendance
from .reports.controller import register as register_reports
from .storage.bootstrap import ensure_collections, ensure_default_users
from .storage.controller import register as register_backups
from .tasks.controller import register as register_tasks
from .users.controller import register as register_users

ERROR_STATUS = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (StorageUnavailable, 503),
)


def _domain_error(e: DomainError):
    status = next((code for cls, code in ERROR_STATUS if isinstance(e, cls)), 400)
    return jsonify({"success": False, "message": str(e)}), status


def create_app(overrides: Optional[dict] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    config = {name: getattr(settings, name) for name in dir(settings) if name.isupper()}
    config.update(overrides or {})

    app.secret_key = config["SECRET_KEY"]
    app.config["DEBUG"] = bool(config.get("DEBUG", False))
    app.config["TESTING"] = bool(config.get("TESTING", False))

    logging.basicConfig(
        level=str(config.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.info("[attendance-tracker] settings=%s data_dir=%s", settings_module, config["DATA_DIR"])

    container = build_container(
        data_dir=config["DATA_DIR"],
        backup_dir=config["BACKUP_DIR"],
        expected_user_count=int(config.get("EXPECTED_USER_COUNT", 10)),
        cache_ttl_seconds=float(config.get("ANALYTICS_CACHE_TTL_SECONDS", 300)),
        anomaly_threshold_hours=float(config.get("ANOMALY_THRESHOLD_HOURS", 3)),
        max_backups=int(config.get("MAX_BACKUPS", 24)),
    )

    if config.get("AUTO_INIT_DATA", False):
        created = ensure_collections(container.store)
        if created:
            app.logger.info("[attendance-tracker] created collections: %s", ", ".join(created))
    if config.get("AUTO_SEED_DATA", False):
        seeded = ensure_default_users(container.store)
        if seeded:
            app.logger.info("[attendance-tracker] seeded %d demo users", seeded)

    app.extensions["attendance_tracker"] = container
    app.register_error_handler(DomainError, _domain_error)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_users(app, container)
    register_attendance(app, container)
    register_tasks(app, container)
    register_devices(app, container)
    register_activity(app, container)
    register_reports(app, container)
    register_backups(app, container)

    return app
