from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import parse_coordinate, parse_day, parse_timestamp
from ..common.validators import require_non_empty
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_DAYS
from .model import AttendanceRecord


def record_to_json(r: AttendanceRecord) -> dict:
    doc = r.to_document()
    doc["is_open"] = r.is_open
    return doc


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    def api_clock_in():
        data = request.get_json(silent=True) or {}
        worker_id = require_non_empty(data.get("worker_id"), "worker_id")
        site_id = require_non_empty(data.get("site_id"), "site_id")
        location = parse_coordinate(data)

        fence = container.sites_repo.get_fence(site_id)
        record = container.ledger.clock_in(
            worker_id,
            site_id,
            location=location,
            fence=fence,
            at=parse_timestamp(data.get("at")),
            photo_url=data.get("photo_url"),
        )
        return jsonify({"success": True, "record": record_to_json(record)}), 201

    @app.route("/api/attendance/<record_id>/clock-out", methods=["POST"], endpoint="api_clock_out")
    def api_clock_out(record_id: str):
        data = request.get_json(silent=True) or {}
        record = container.ledger.clock_out(
            record_id,
            location=parse_coordinate(data),
            at=parse_timestamp(data.get("at")),
        )
        return jsonify({"success": True, "record": record_to_json(record)}), 200

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    def api_attendance_history():
        worker_id = require_non_empty(request.args.get("worker_id"), "worker_id")
        today = now_local().date()
        start = parse_day(request.args.get("start") or (today - timedelta(days=DEFAULT_HISTORY_DAYS)).isoformat(), "start")
        end = parse_day(request.args.get("end") or today.isoformat(), "end")

        rows = container.ledger.history_rows(worker_id, start, end)
        return jsonify({"success": True, "worker_id": worker_id, "rows": rows}), 200
