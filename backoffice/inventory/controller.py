from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.http import error_response, json_body, log_route_complete, log_route_start, login_required
from ..common.pagination import PageRequest
from ..container import Container
from .labels import render_label_png


def register(app: Flask, container: Container) -> None:
    svc = container.inventory_service

    @app.route("/api/inventory/in", methods=["POST"], endpoint="inventory_in")
    @login_required
    def inventory_in():
        try:
            body = json_body()
            item = container.run(
                "inventory-in", lambda: svc.stock_in(barcode=body.get("barcode") or "", location=body.get("location"))
            )
            return jsonify(item.to_dict()), 201
        except Exception as e:
            return error_response("add inventory item", e)

    @app.route("/api/inventory/out", methods=["POST"], endpoint="inventory_out")
    @login_required
    def inventory_out():
        try:
            svc.stock_out()
        except Exception as e:
            return error_response("remove inventory", e)

    @app.route("/api/inventory/item", methods=["DELETE"], endpoint="inventory_item_delete")
    @login_required
    def inventory_item_delete():
        try:
            barcode = request.args.get("barcode") or json_body().get("barcode") or ""
            container.run("inventory-item-delete", lambda: svc.remove(barcode))
            return jsonify({"ok": True})
        except Exception as e:
            return error_response("delete inventory item", e)

    @app.route("/api/inventory/move", methods=["POST"], endpoint="inventory_move")
    @login_required
    def inventory_move():
        try:
            body = json_body()
            item = container.run(
                "inventory-move",
                lambda: svc.move(barcode=body.get("barcode") or "", to_location=body.get("toLocation")),
            )
            return jsonify(item.to_dict())
        except Exception as e:
            return error_response("move inventory", e)

    @app.route("/api/inventory/list", methods=["GET"], endpoint="inventory_list")
    @login_required
    def inventory_list():
        try:
            flt = svc.parse_filter(request.args)
            page = PageRequest.from_args(request.args)
            log_route_start("inventory-list", request.args.to_dict())
            result = container.run("inventory-list", lambda: svc.list_items(flt, page))
            log_route_complete("inventory-list", len(result["items"]))
            return jsonify(result)
        except Exception as e:
            return error_response("list inventory items", e)

    @app.route("/api/inventory/overview", methods=["GET"], endpoint="inventory_overview")
    @login_required
    def inventory_overview():
        try:
            return jsonify(container.run("inventory-overview", svc.overview))
        except Exception as e:
            return error_response("get overview", e)

    @app.route("/api/inventory/set", methods=["POST"], endpoint="inventory_set")
    @login_required
    def inventory_set():
        try:
            body = json_body()
            log_route_start("inventory-set", body)
            result = container.run(
                "inventory-set",
                lambda: svc.set_stock(
                    product_id=body.get("productId"), location=body.get("location"), quantity=body.get("quantity")
                ),
            )
            log_route_complete("inventory-set", 1)
            return jsonify(
                {
                    "success": True,
                    "productId": result.product_id,
                    "location": result.location.value,
                    "quantity": result.quantity,
                }
            )
        except Exception as e:
            return error_response("set inventory stock", e)

    @app.route("/api/inventory/label/<path:barcode>.png", methods=["GET"], endpoint="inventory_label")
    @login_required
    def inventory_label(barcode: str):
        try:
            return send_file(render_label_png(barcode.strip().upper()), mimetype="image/png")
        except Exception as e:
            return error_response("render label", e)
