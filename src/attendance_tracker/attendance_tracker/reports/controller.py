from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.auth import current_identity, login_required
from ..container import Container

CSV_FIELDS = ["id", "userId", "username", "action", "timestamp", "location"]


def _analytics_options() -> dict:
    options = {}
    for key in ("window", "start", "end", "top_n", "days"):
        value = request.args.get(key)
        if value:
            options[key] = value

    users = []
    for value in request.args.getlist("users"):
        users.extend(u.strip() for u in value.split(",") if u.strip())
    if users:
        options["users"] = sorted(set(users))
    return options


def register(app: Flask, container: Container) -> None:
    def _window_report(report_type: str):
        return container.analytics_service.get_window_report(
            report_type,
            start=request.args.get("start"),
            end=request.args.get("end"),
        )

    @app.route("/api/reports/<report_type>", methods=["GET"], endpoint="report")
    @login_required
    def report(report_type: str):
        return jsonify(_window_report(report_type).to_dict())

    @app.route("/api/reports/<report_type>/csv", methods=["GET"], endpoint="report_csv")
    @login_required
    def report_csv(report_type: str):
        data = _window_report(report_type)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for record in data.records:
            writer.writerow(record.to_record())

        filename = f"attendance_{data.type.value}_{data.start.strftime('%Y%m%d')}_{data.end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/analytics/<kind>", methods=["GET"], endpoint="analytics")
    @login_required
    def analytics(kind: str):
        snapshot = container.analytics_service.get_analytics(kind, _analytics_options())
        return jsonify(snapshot.to_dict())

    @app.route("/api/anomalies/me", methods=["GET"], endpoint="my_anomalies")
    @login_required
    def my_anomalies():
        anomalies = container.analytics_service.get_user_anomalies(current_identity().user_id)
        return jsonify([a.to_dict() for a in anomalies])
