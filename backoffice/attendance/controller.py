from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body, login_required
from ..common.validators import require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @login_required
    def attendance_clock_in():
        try:
            user_id = require_int(json_body().get("userId"), "userId", minimum=1)
            record = container.run("attendance-clock-in", lambda: svc.clock_in(user_id))
            return jsonify(record.to_dict())
        except Exception as e:
            return error_response("clock in", e)

    @app.route("/api/attendance/<int:record_id>/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @login_required
    def attendance_clock_out(record_id: int):
        try:
            record = container.run("attendance-clock-out", lambda: svc.clock_out(record_id))
            return jsonify(record.to_dict())
        except Exception as e:
            return error_response("clock out", e)

    @app.route("/api/attendance/open", methods=["GET"], endpoint="attendance_open")
    @login_required
    def attendance_open():
        try:
            user_id = require_int(request.args.get("userId"), "userId", minimum=1)
            record = container.run("attendance-open", lambda: svc.open_record(user_id))
            return jsonify({"open": record.to_dict() if record else None})
        except Exception as e:
            return error_response("fetch attendance", e)

    @app.route("/api/attendance/me", methods=["GET"], endpoint="attendance_me")
    @login_required
    def attendance_me():
        try:
            user_id = require_int(request.args.get("userId"), "userId", minimum=1)
            month = request.args.get("month")
            return jsonify(container.run("attendance-me", lambda: svc.monthly(user_id, month)))
        except Exception as e:
            return error_response("fetch attendance", e)
