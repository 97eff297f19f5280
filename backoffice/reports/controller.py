from __future__ import annotations

from flask import Flask, jsonify, request

from ..b2b.model import B2BOrderFilter
from ..common.datetime_utils import date_range_utc, parse_optional_date
from ..common.http import error_response, log_route_complete, log_route_start, login_required
from ..common.validators import optional_location
from ..container import Container
from ..sales.model import SaleFilter


def _date_bounds():
    start_day = parse_optional_date(request.args.get("from"))
    end_day = parse_optional_date(request.args.get("to"))
    start = date_range_utc(start_day, start_day)[0] if start_day else None
    end = date_range_utc(end_day, end_day)[1] if end_day else None
    return start, end


def _sale_filter() -> SaleFilter:
    start, end = _date_bounds()
    return SaleFilter(
        start=start,
        end=end,
        outlet=request.args.get("outlet") or None,
        location=optional_location(request.args.get("location")),
    )


def register(app: Flask, container: Container) -> None:
    svc = container.report_service

    @app.route("/api/reports/sales", methods=["GET"], endpoint="reports_sales")
    @login_required
    def reports_sales():
        try:
            flt = _sale_filter()
            log_route_start("reports-sales", request.args.to_dict())
            data = container.run("reports-sales", lambda: svc.sales_report(flt))
            log_route_complete("reports-sales", len(data["sales"]))
            return jsonify(data)
        except Exception as e:
            return error_response("build sales report", e)

    @app.route("/api/reports/inventory", methods=["GET"], endpoint="reports_inventory")
    @login_required
    def reports_inventory():
        try:
            location = optional_location(request.args.get("location"))
            code = request.args.get("productCode") or None
            return jsonify(
                container.run("reports-inventory", lambda: svc.inventory_report(location=location, product_code=code))
            )
        except Exception as e:
            return error_response("build inventory report", e)

    @app.route("/api/reports/b2b", methods=["GET"], endpoint="reports_b2b")
    @login_required
    def reports_b2b():
        try:
            start, end = _date_bounds()
            flt = B2BOrderFilter(start=start, end=end, location=optional_location(request.args.get("location")))
            return jsonify(container.run("reports-b2b", lambda: svc.b2b_report(flt)))
        except Exception as e:
            return error_response("build b2b report", e)

    @app.route("/api/reports/menu-items", methods=["GET"], endpoint="reports_menu_items")
    @login_required
    def reports_menu_items():
        try:
            flt = _sale_filter()
            return jsonify(container.run("reports-menu-items", lambda: svc.menu_items_report(flt)))
        except Exception as e:
            return error_response("build menu items report", e)
