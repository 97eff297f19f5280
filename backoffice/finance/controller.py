from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.excel import XLSX_MIMETYPE, build_workbook
from ..common.http import admin_required, error_response, json_body, log_route_complete, log_route_start
from ..common.validators import optional_int
from ..container import Container


def _report_sheets(reports: list[dict]) -> dict[str, list[dict]]:
    summary = [
        {
            "Period": r["name"],
            "Month": r["month"],
            "Year": r["year"],
            "Revenue": r["actualRevenue"],
            "Plan": r["plan"]["total"],
            "Actual": r["actual"]["total"],
            "Net Profit (Plan)": r["netProfitPlan"],
            "Net Profit (Actual)": r["netProfitActual"],
        }
        for r in reports
    ]
    categories = [
        {"Period": r["name"], "Kind": kind, "Category": c["category"], "Amount": c["amount"]}
        for r in reports
        for kind in ("plan", "actual")
        for c in r[kind]["byCategory"]
    ]
    return {"Summary": summary, "Categories": categories}


def register(app: Flask, container: Container) -> None:
    svc = container.finance_service

    @app.route("/api/finance/weeks", methods=["GET"], endpoint="finance_weeks_list")
    @admin_required
    def finance_weeks_list():
        try:
            weeks = container.run("finance-weeks-list", svc.list_weeks)
            return jsonify({"weeks": [w.to_dict() for w in weeks]})
        except Exception as e:
            return error_response("fetch finance weeks", e)

    @app.route("/api/finance/weeks", methods=["POST"], endpoint="finance_weeks_create")
    @admin_required
    def finance_weeks_create():
        try:
            body = json_body()
            week = container.run("finance-weeks-create", lambda: svc.create_week(body))
            return jsonify({"week": week.to_dict()}), 201
        except Exception as e:
            return error_response("create finance week", e)

    @app.route("/api/finance/plan", methods=["GET"], endpoint="finance_plan_get")
    @admin_required
    def finance_plan_get():
        try:
            period_id = optional_int(request.args.get("periodId"), "periodId")
            week_id = optional_int(request.args.get("weekId"), "weekId")
            log_route_start("finance-plan-get", {"periodId": period_id, "weekId": week_id})
            if not period_id and not week_id:
                periods = container.run("finance-plan-list", svc.list_periods)
                log_route_complete("finance-plan-get", len(periods))
                return jsonify({"periods": [p.to_summary() for p in periods]})
            period = container.run(
                "finance-plan-get-period", lambda: svc.find_period(period_id=period_id, week_id=week_id)
            )
            return jsonify(
                {
                    "period": period.to_dict(),
                    "planEntries": [e.to_dict() for e in period.plan_entries],
                    "actualEntries": [e.to_dict() for e in period.actual_entries],
                }
            )
        except Exception as e:
            return error_response("fetch finance plan", e)

    @app.route("/api/finance/plan", methods=["POST"], endpoint="finance_plan_save")
    @admin_required
    def finance_plan_save():
        try:
            body = json_body()
            period = container.run("finance-plan-save", lambda: svc.save_plan(body))
            return jsonify({"period": period.to_dict(), "planEntries": [e.to_dict() for e in period.plan_entries]})
        except Exception as e:
            return error_response("save finance plan", e)

    @app.route("/api/finance/actual", methods=["GET"], endpoint="finance_actual_get")
    @admin_required
    def finance_actual_get():
        try:
            period_id = optional_int(request.args.get("periodId"), "periodId")
            month = optional_int(request.args.get("month"), "month")
            year = optional_int(request.args.get("year"), "year")
            if not period_id and not (month and year):
                periods = container.run("finance-actual-list", svc.list_periods)
                return jsonify({"periods": [p.to_summary() for p in periods]})
            period = container.run(
                "finance-actual-get-period",
                lambda: svc.find_actual_period(period_id=period_id, month=month, year=year),
            )
            return jsonify({"period": period.to_dict(), "actualEntries": [e.to_dict() for e in period.actual_entries]})
        except Exception as e:
            return error_response("fetch finance actual", e)

    @app.route("/api/finance/actual", methods=["POST"], endpoint="finance_actual_save")
    @admin_required
    def finance_actual_save():
        try:
            body = json_body()
            period = container.run("finance-actual-save", lambda: svc.save_actual(body))
            return jsonify({"period": period.to_dict(), "actualEntries": [e.to_dict() for e in period.actual_entries]})
        except Exception as e:
            return error_response("save finance actual", e)

    @app.route("/api/finance/metrics", methods=["GET"], endpoint="finance_metrics")
    @admin_required
    def finance_metrics():
        try:
            period_id = optional_int(request.args.get("periodId"), "periodId")
            log_route_start("finance-metrics", request.args.to_dict())
            payload = container.run(
                "finance-metrics",
                lambda: svc.metrics(start=request.args.get("from"), end=request.args.get("to"), period_id=period_id),
            )
            log_route_complete("finance-metrics", len(payload["actualRevenueByOutlet"]))
            return jsonify(payload)
        except Exception as e:
            return error_response("fetch finance metrics", e)

    @app.route("/api/finance/report", methods=["GET"], endpoint="finance_report")
    @admin_required
    def finance_report():
        try:
            year = optional_int(request.args.get("year"), "year")
            reports = container.run("finance-report", lambda: svc.report(year=year))
            log_route_complete("finance-report", len(reports))
            return jsonify({"reports": reports})
        except Exception as e:
            return error_response("fetch finance report", e)

    @app.route("/api/finance/report.xlsx", methods=["GET"], endpoint="finance_report_xlsx")
    @admin_required
    def finance_report_xlsx():
        try:
            year = optional_int(request.args.get("year"), "year")
            reports = container.run("finance-report-export", lambda: svc.report(year=year))
            output = build_workbook(_report_sheets(reports))
            name = f"finance_report_{year}.xlsx" if year else "finance_report.xlsx"
            return send_file(output, download_name=name, as_attachment=True, mimetype=XLSX_MIMETYPE)
        except Exception as e:
            return error_response("export finance report", e)

    @app.route("/api/finance/debt", methods=["GET"], endpoint="finance_debt")
    @admin_required
    def finance_debt():
        try:
            period_id = optional_int(request.args.get("periodId"), "periodId")
            return jsonify(container.run("finance-debt", lambda: svc.debt_ledger(period_id=period_id)))
        except Exception as e:
            return error_response("fetch finance debt", e)

    @app.route("/api/finance/debt", methods=["POST"], endpoint="finance_debt_payment")
    @admin_required
    def finance_debt_payment():
        try:
            body = json_body()
            payment = container.run("finance-debt-payment", lambda: svc.add_payment(body))
            return jsonify(payment.to_dict()), 201
        except Exception as e:
            return error_response("create finance debt payment", e)
