from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import date_range_utc, parse_optional_date
from ..common.http import error_response, json_body, log_route_complete, log_route_start, login_required
from ..common.pagination import PageRequest
from ..common.validators import optional_location
from ..container import Container
from .model import OrderFilter


def register(app: Flask, container: Container) -> None:
    svc = container.order_service

    @app.route("/api/orders", methods=["GET"], endpoint="orders_list")
    @login_required
    def orders_list():
        try:
            start_day = parse_optional_date(request.args.get("from"))
            end_day = parse_optional_date(request.args.get("to"))
            flt = OrderFilter(
                start=date_range_utc(start_day, start_day)[0] if start_day else None,
                end=date_range_utc(end_day, end_day)[1] if end_day else None,
                outlet=request.args.get("outlet") or None,
                location=optional_location(request.args.get("location")),
            )
            page = PageRequest.from_args(request.args, size_key="pageSize")
            log_route_start("orders-list", request.args.to_dict())
            rows, total = container.run("orders-list", lambda: svc.list_orders(flt, page))
            log_route_complete("orders-list", len(rows))
            return jsonify({"rows": [o.to_dict() for o in rows], "total": total, "page": page.page, "pageSize": page.limit})
        except Exception as e:
            return error_response("fetch orders", e)

    @app.route("/api/orders", methods=["POST"], endpoint="orders_create")
    @login_required
    def orders_create():
        try:
            body = json_body()
            log_route_start("orders-create")
            order = container.run("orders-create", lambda: svc.create_order(body))
            log_route_complete("orders-create", 1)
            return jsonify(order.to_dict()), 201
        except Exception as e:
            return error_response("create order", e)

    @app.route("/api/orders/pending", methods=["GET"], endpoint="orders_pending")
    @login_required
    def orders_pending():
        try:
            page = PageRequest.from_args(request.args, size_key="pageSize")
            location = optional_location(request.args.get("location"))
            search = request.args.get("search")
            rows, total = container.run(
                "orders-pending", lambda: svc.pending_orders(location=location, search=search, page=page)
            )
            total_pages = (total + page.limit - 1) // page.limit if total else 0
            return jsonify(
                {
                    "orders": [o.to_dict() for o in rows],
                    "pagination": {
                        "page": page.page,
                        "pageSize": page.limit,
                        "total": total,
                        "totalPages": total_pages,
                    },
                }
            )
        except Exception as e:
            return error_response("fetch pending orders", e)

    @app.route("/api/orders/<int:order_id>", methods=["GET"], endpoint="orders_get")
    @login_required
    def orders_get(order_id: int):
        try:
            return jsonify(container.run("order-get", lambda: svc.get_order(order_id)).to_dict())
        except Exception as e:
            return error_response("fetch order", e)

    @app.route("/api/orders/<int:order_id>", methods=["PUT", "PATCH"], endpoint="orders_update")
    @login_required
    def orders_update(order_id: int):
        try:
            body = json_body()
            return jsonify(container.run("order-update", lambda: svc.update_order(order_id, body)).to_dict())
        except Exception as e:
            return error_response("update order", e)

    @app.route("/api/orders/<int:order_id>", methods=["DELETE"], endpoint="orders_delete")
    @login_required
    def orders_delete(order_id: int):
        try:
            container.run("order-delete", lambda: svc.delete_order(order_id))
            return jsonify({"success": True})
        except Exception as e:
            return error_response("delete order", e)
