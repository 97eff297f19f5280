from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import date_range_utc, parse_optional_date
from ..common.http import error_response, json_body, log_route_complete, log_route_start, login_required
from ..common.pagination import PageRequest
from ..common.validators import optional_location
from ..container import Container
from .model import B2BOrderFilter


def register(app: Flask, container: Container) -> None:
    svc = container.b2b_order_service

    @app.route("/api/b2b/orders", methods=["GET"], endpoint="b2b_orders_list")
    @login_required
    def b2b_orders_list():
        try:
            start_day = parse_optional_date(request.args.get("from"))
            end_day = parse_optional_date(request.args.get("to"))
            flt = B2BOrderFilter(
                start=date_range_utc(start_day, start_day)[0] if start_day else None,
                end=date_range_utc(end_day, end_day)[1] if end_day else None,
                outlet=svc.parse_outlet(request.args.get("outlet")),
                location=optional_location(request.args.get("location")),
                search=(request.args.get("search") or "").strip() or None,
            )
            page = PageRequest.from_args(request.args, size_key="pageSize")
            log_route_start("b2b-orders-list", request.args.to_dict())
            rows, total = container.run("b2b-orders-list", lambda: svc.list_orders(flt, page))
            log_route_complete("b2b-orders-list", len(rows))
            return jsonify({"rows": [o.to_dict() for o in rows], "total": total, "page": page.page, "pageSize": page.limit})
        except Exception as e:
            return error_response("fetch b2b orders", e)

    @app.route("/api/b2b/orders", methods=["POST"], endpoint="b2b_orders_create")
    @login_required
    def b2b_orders_create():
        try:
            body = json_body()
            log_route_start("b2b-orders-create")
            order = container.run("b2b-orders-create", lambda: svc.create_order(body))
            log_route_complete("b2b-orders-create", 1)
            return jsonify(order.to_dict()), 201
        except Exception as e:
            return error_response("create b2b order", e)

    @app.route("/api/b2b/orders/validate-barcodes", methods=["POST"], endpoint="b2b_orders_validate")
    @login_required
    def b2b_orders_validate():
        try:
            body = json_body()
            return jsonify(container.run("b2b-orders-validate-barcodes", lambda: svc.validate_barcodes(body)))
        except Exception as e:
            return error_response("validate barcodes", e)

    @app.route("/api/b2b/orders/<int:order_id>", methods=["GET"], endpoint="b2b_orders_get")
    @login_required
    def b2b_orders_get(order_id: int):
        try:
            return jsonify(container.run("b2b-order-get", lambda: svc.get_order(order_id)).to_dict())
        except Exception as e:
            return error_response("fetch b2b order", e)

    @app.route("/api/b2b/orders/<int:order_id>", methods=["PUT", "PATCH"], endpoint="b2b_orders_update")
    @login_required
    def b2b_orders_update(order_id: int):
        try:
            body = json_body()
            return jsonify(container.run("b2b-order-update", lambda: svc.update_order(order_id, body)).to_dict())
        except Exception as e:
            return error_response("update b2b order", e)

    @app.route("/api/b2b/orders/<int:order_id>", methods=["DELETE"], endpoint="b2b_orders_delete")
    @login_required
    def b2b_orders_delete(order_id: int):
        try:
            container.run("b2b-order-delete", lambda: svc.delete_order(order_id))
            return jsonify({"success": True})
        except Exception as e:
            return error_response("delete b2b order", e)
