from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body, log_route_complete, log_route_start, login_required
from ..common.pagination import PageRequest
from ..common.validators import optional_location
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.delivery_service

    @app.route("/api/deliveries", methods=["GET"], endpoint="deliveries_list")
    @login_required
    def deliveries_list():
        try:
            page = PageRequest.from_args(request.args, size_key="pageSize")
            location = optional_location(request.args.get("location"))
            search = request.args.get("search")
            log_route_start("deliveries-list", request.args.to_dict())
            rows, total = container.run(
                "deliveries-list", lambda: svc.list_deliveries(location=location, search=search, page=page)
            )
            log_route_complete("deliveries-list", len(rows))
            return jsonify({"rows": [d.to_dict() for d in rows], "total": total, "page": page.page, "pageSize": page.limit})
        except Exception as e:
            return error_response("fetch deliveries", e)

    @app.route("/api/deliveries", methods=["POST"], endpoint="deliveries_create")
    @login_required
    def deliveries_create():
        try:
            body = json_body()
            log_route_start("deliveries-create", {"orderId": body.get("orderId")})
            result = container.run("deliveries-create", lambda: svc.create_delivery(body))
            log_route_complete("deliveries-create", 1)
            return jsonify(result.to_dict()), 201
        except Exception as e:
            return error_response("create delivery", e)

    @app.route("/api/deliveries/<int:delivery_id>/cancel", methods=["POST"], endpoint="deliveries_cancel")
    @login_required
    def deliveries_cancel(delivery_id: int):
        try:
            delivery = container.run("deliveries-cancel", lambda: svc.cancel_delivery(delivery_id))
            return jsonify({"success": True, "orderId": delivery.order_id})
        except Exception as e:
            return error_response("cancel delivery", e)
