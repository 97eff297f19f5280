from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import date_range_utc, parse_optional_date
from ..common.http import error_response, json_body, login_required
from ..common.pagination import PageRequest
from ..common.validators import optional_location
from ..container import Container
from .model import SaleFilter


def _filter_from_args(args) -> SaleFilter:
    start_day = parse_optional_date(args.get("from"))
    end_day = parse_optional_date(args.get("to"))
    start = date_range_utc(start_day, start_day)[0] if start_day else None
    end = date_range_utc(end_day, end_day)[1] if end_day else None
    return SaleFilter(
        start=start,
        end=end,
        outlet=args.get("outlet") or None,
        location=optional_location(args.get("location")),
    )


def register(app: Flask, container: Container) -> None:
    svc = container.sale_service

    @app.route("/api/sales", methods=["GET"], endpoint="sales_list")
    @login_required
    def sales_list():
        try:
            flt = _filter_from_args(request.args)
            page = PageRequest.from_args(request.args, size_key="pageSize")
            rows, total = container.run("sales-list", lambda: svc.list_sales(flt, page))
            return jsonify({"rows": [s.to_dict() for s in rows], "total": total, "page": page.page, "pageSize": page.limit})
        except Exception as e:
            return error_response("fetch sales", e)

    @app.route("/api/sales", methods=["POST"], endpoint="sales_create")
    @login_required
    def sales_create():
        try:
            body = json_body()
            sale = container.run("sales-create", lambda: svc.create_sale(body))
            return jsonify(sale.to_dict()), 201
        except Exception as e:
            return error_response("create sale", e)

    @app.route("/api/sales/estimate", methods=["POST"], endpoint="sales_estimate")
    @login_required
    def sales_estimate():
        try:
            body = json_body()
            return jsonify(container.run("sales-estimate", lambda: svc.estimate(body)))
        except Exception as e:
            return error_response("estimate", e)

    @app.route("/api/sales/<int:sale_id>", methods=["GET"], endpoint="sales_get")
    @login_required
    def sales_get(sale_id: int):
        try:
            return jsonify(container.run("sales-get", lambda: svc.get_sale(sale_id)).to_dict())
        except Exception as e:
            return error_response("fetch sale", e)

    @app.route("/api/sales/<int:sale_id>", methods=["PUT", "PATCH"], endpoint="sales_update")
    @login_required
    def sales_update(sale_id: int):
        try:
            body = json_body()
            return jsonify(container.run("sales-update", lambda: svc.update_sale(sale_id, body)).to_dict())
        except Exception as e:
            return error_response("update sale", e)

    @app.route("/api/sales/<int:sale_id>", methods=["DELETE"], endpoint="sales_delete")
    @login_required
    def sales_delete(sale_id: int):
        try:
            container.run("sales-delete", lambda: svc.delete_sale(sale_id))
            return jsonify({"ok": True})
        except Exception as e:
            return error_response("delete sale", e)

    @app.route("/api/sales/<int:sale_id>/items", methods=["GET"], endpoint="sales_items_list")
    @login_required
    def sales_items_list(sale_id: int):
        try:
            items = container.run("sales-items", lambda: svc.list_items(sale_id))
            return jsonify([i.to_dict() for i in items])
        except Exception as e:
            return error_response("fetch sale items", e)

    @app.route("/api/sales/<int:sale_id>/items", methods=["POST"], endpoint="sales_items_add")
    @login_required
    def sales_items_add(sale_id: int):
        try:
            body = json_body()
            item = container.run(
                "sales-items-add",
                lambda: svc.add_item(sale_id, barcode=body.get("barcode") or "", status=body.get("status")),
            )
            return jsonify(item.to_dict()), 201
        except Exception as e:
            return error_response("add sale item", e)

    @app.route("/api/sales/items/<int:item_id>", methods=["PUT", "PATCH"], endpoint="sales_item_update")
    @login_required
    def sales_item_update(item_id: int):
        try:
            body = json_body()
            return jsonify(container.run("sales-item-update", lambda: svc.update_item(item_id, body)).to_dict())
        except Exception as e:
            return error_response("update sale item", e)

    @app.route("/api/sales/items/<int:item_id>", methods=["DELETE"], endpoint="sales_item_delete")
    @login_required
    def sales_item_delete(item_id: int):
        try:
            return jsonify(container.run("sales-item-delete", lambda: svc.delete_item(item_id)).to_dict())
        except Exception as e:
            return error_response("delete sale item", e)
