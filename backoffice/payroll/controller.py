from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.excel import XLSX_MIMETYPE, build_workbook
from ..common.http import admin_required, error_response, json_body, log_route_complete, log_route_start, login_required
from ..common.validators import optional_int
from ..container import Container


def summary_rows(summary: dict) -> list[dict]:
    return [
        {
            "Name": line["user"]["name"],
            "Username": line["user"]["username"],
            "Role": line["user"]["role"],
            "Base Salary": line["user"]["baseSalary"],
            "Late (min)": line["totals"]["latenessMinutes"],
            "Worked (min)": line["totals"]["workedMinutes"],
            "Overtime (min)": line["totals"]["overtimeMinutes"],
            "Lateness Penalty": line["penalty"],
            "Manual Penalty": line["manualPenalty"],
            "Overtime Pay": line["overtimePay"],
            "Net Salary": line["netSalary"],
            "Bonus": line["bonus"],
        }
        for line in summary["users"]
    ]


def register(app: Flask, container: Container) -> None:
    payroll = container.payroll_service
    overtime = container.overtime_service
    bonuses = container.bonus_service
    penalties = container.penalty_service

    @app.route("/api/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @admin_required
    def payroll_summary():
        try:
            month = request.args.get("month")
            log_route_start("payroll-summary", {"month": month})
            data = container.run("payroll-summary", lambda: payroll.summary(month))
            log_route_complete("payroll-summary", len(data["users"]))
            return jsonify(data)
        except Exception as e:
            return error_response("build payroll summary", e)

    @app.route("/api/payroll/summary.xlsx", methods=["GET"], endpoint="payroll_summary_xlsx")
    @admin_required
    def payroll_summary_xlsx():
        try:
            month = request.args.get("month")
            data = container.run("payroll-summary-export", lambda: payroll.summary(month))
            output = build_workbook({"Payroll": summary_rows(data), "Overtime": data["overtimeDetails"]})
            return send_file(
                output, download_name=f"payroll_{data['month']}.xlsx", as_attachment=True, mimetype=XLSX_MIMETYPE
            )
        except Exception as e:
            return error_response("export payroll summary", e)

    @app.route("/api/overtime", methods=["GET"], endpoint="overtime_list")
    @login_required
    def overtime_list():
        try:
            user_id = optional_int(request.args.get("userId"), "userId")
            if request.args.get("all") == "true":
                user_id = None
            month = request.args.get("month")
            items = container.run("overtime-list", lambda: overtime.list_requests(month=month, user_id=user_id))
            return jsonify({"items": [o.to_dict() for o in items]})
        except Exception as e:
            return error_response("fetch overtime", e)

    @app.route("/api/overtime", methods=["POST"], endpoint="overtime_create")
    @login_required
    def overtime_create():
        try:
            body = json_body()
            item = container.run("overtime-create", lambda: overtime.request(body))
            return jsonify(item.to_dict()), 201
        except Exception as e:
            return error_response("create overtime request", e)

    @app.route("/api/overtime/<int:request_id>/approve", methods=["POST"], endpoint="overtime_approve")
    @admin_required
    def overtime_approve(request_id: int):
        try:
            body = json_body()
            item = container.run("overtime-approve", lambda: overtime.decide(request_id, body))
            return jsonify(item.to_dict())
        except Exception as e:
            return error_response("update overtime request", e)

    @app.route("/api/bonus", methods=["GET"], endpoint="bonus_list")
    @admin_required
    def bonus_list():
        try:
            user_id = optional_int(request.args.get("userId"), "userId")
            year = optional_int(request.args.get("year"), "year")
            month = optional_int(request.args.get("month"), "month")
            rows = container.run(
                "bonus-list", lambda: bonuses.list_bonuses(user_id=user_id, year=year, month=month)
            )
            return jsonify({"rows": [b.to_dict() for b in rows]})
        except Exception as e:
            return error_response("fetch bonuses", e)

    @app.route("/api/bonus", methods=["POST"], endpoint="bonus_create")
    @admin_required
    def bonus_create():
        try:
            body = json_body()
            bonus = container.run("bonus-create", lambda: bonuses.create(body))
            return jsonify(bonus.to_dict()), 201
        except Exception as e:
            return error_response("create bonus", e)

    @app.route("/api/bonus/<int:bonus_id>", methods=["PUT", "PATCH"], endpoint="bonus_update")
    @admin_required
    def bonus_update(bonus_id: int):
        try:
            body = json_body()
            return jsonify(container.run("bonus-update", lambda: bonuses.update(bonus_id, body)).to_dict())
        except Exception as e:
            return error_response("update bonus", e)

    @app.route("/api/bonus/<int:bonus_id>", methods=["DELETE"], endpoint="bonus_delete")
    @admin_required
    def bonus_delete(bonus_id: int):
        try:
            container.run("bonus-delete", lambda: bonuses.delete(bonus_id))
            return jsonify({"ok": True})
        except Exception as e:
            return error_response("delete bonus", e)

    @app.route("/api/penalties", methods=["GET"], endpoint="penalties_list")
    @admin_required
    def penalties_list():
        try:
            user_id = optional_int(request.args.get("userId"), "userId")
            month = request.args.get("month")
            rows = container.run("penalties-list", lambda: penalties.list_penalties(month=month, user_id=user_id))
            return jsonify({"rows": [p.to_dict() for p in rows]})
        except Exception as e:
            return error_response("fetch penalties", e)

    @app.route("/api/penalties", methods=["POST"], endpoint="penalties_create")
    @admin_required
    def penalties_create():
        try:
            body = json_body()
            penalty = container.run("penalties-create", lambda: penalties.create(body))
            return jsonify(penalty.to_dict()), 201
        except Exception as e:
            return error_response("create penalty", e)

    @app.route("/api/penalties/<int:penalty_id>", methods=["DELETE"], endpoint="penalties_delete")
    @admin_required
    def penalties_delete(penalty_id: int):
        try:
            container.run("penalties-delete", lambda: penalties.delete(penalty_id))
            return jsonify({"ok": True})
        except Exception as e:
            return error_response("delete penalty", e)
