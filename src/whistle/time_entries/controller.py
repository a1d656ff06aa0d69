from __future__ import annotations

import csv
import io

from flask import Flask, g, jsonify

from ..common.datetime_utils import to_iso
from ..common.web import json_body, login_required
from ..container import Container

ENTRY_CSV_FIELDS = ["date", "day_of_week", "start_time", "end_time", "duration_hours"]


def register(app: Flask, container: Container) -> None:
    sessions = container.session_service
    aggregation = container.aggregation_service
    auth_required = login_required(container.auth_service)

    @app.route("/api/time/clock-in", methods=["POST"], endpoint="clock_in")
    @auth_required
    def clock_in():
        data = json_body()
        entry = sessions.clock_in(g.user.user_id, data.get("timezone"))
        return (
            jsonify(
                {
                    "success": True,
                    "entry": {
                        "id": entry.entry_id,
                        "start_time": to_iso(entry.start_time),
                        "timezone": entry.start_timezone,
                    },
                }
            ),
            201,
        )

    @app.route("/api/time/clock-out", methods=["POST"], endpoint="clock_out")
    @auth_required
    def clock_out():
        data = json_body()
        entry = sessions.clock_out(g.user.user_id, is_automatic=data.get("auto") is True)
        return jsonify(
            {
                "success": True,
                "entry": {
                    "id": entry.entry_id,
                    "start_time": to_iso(entry.start_time),
                    "end_time": to_iso(entry.end_time),
                    "duration_hours": entry.duration_hours(),
                },
            }
        )

    @app.route("/api/time/status", methods=["GET"], endpoint="status")
    @auth_required
    def status():
        return jsonify(aggregation.status(g.user.user_id).to_dict())

    @app.route("/api/time/heatmap", methods=["GET"], endpoint="heatmap")
    @auth_required
    def heatmap():
        return jsonify(aggregation.heatmap_view(g.user.user_id))

    @app.route("/api/time/entries", methods=["GET"], endpoint="entries")
    @auth_required
    def entries():
        return jsonify({"entries": aggregation.list_entries(g.user.user_id)})

    @app.route("/api/time/entries.csv", methods=["GET"], endpoint="entries_csv")
    @auth_required
    def entries_csv():
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=ENTRY_CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in aggregation.list_entries(g.user.user_id):
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=whistle-entries.csv"},
        )
