from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    products = container.product_service
    products_b2b = container.product_b2b_service

    @app.route("/api/products", methods=["GET"], endpoint="products_list")
    @login_required
    def products_list():
        try:
            return jsonify([p.to_dict() for p in container.run("products-list", products.list_products)])
        except Exception as e:
            return error_response("fetch products", e)

    @app.route("/api/products", methods=["POST"], endpoint="products_create")
    @login_required
    def products_create():
        try:
            body = json_body()
            return jsonify(container.run("products-create", lambda: products.create_product(body)).to_dict()), 201
        except Exception as e:
            return error_response("create product", e)

    @app.route("/api/products/<int:product_id>", methods=["GET"], endpoint="products_get")
    @login_required
    def products_get(product_id: int):
        try:
            return jsonify(container.run("products-get", lambda: products.get_product(product_id)).to_dict())
        except Exception as e:
            return error_response("fetch product", e)

    @app.route("/api/products/<int:product_id>", methods=["PUT", "PATCH"], endpoint="products_update")
    @login_required
    def products_update(product_id: int):
        try:
            body = json_body()
            return jsonify(container.run("products-update", lambda: products.update_product(product_id, body)).to_dict())
        except Exception as e:
            return error_response("update product", e)

    @app.route("/api/products/<int:product_id>", methods=["DELETE"], endpoint="products_delete")
    @login_required
    def products_delete(product_id: int):
        try:
            container.run("products-delete", lambda: products.delete_product(product_id))
            return jsonify({"ok": True})
        except Exception as e:
            return error_response("delete product", e)

    @app.route("/api/b2b/products", methods=["GET"], endpoint="b2b_products_list")
    @login_required
    def b2b_products_list():
        try:
            return jsonify([p.to_dict() for p in container.run("b2b-products-list", products_b2b.list_products)])
        except Exception as e:
            return error_response("fetch b2b products", e)

    @app.route("/api/b2b/products", methods=["POST"], endpoint="b2b_products_create")
    @login_required
    def b2b_products_create():
        try:
            body = json_body()
            product = container.run("b2b-products-create", lambda: products_b2b.create_product(body))
            return jsonify(product.to_dict()), 201
        except Exception as e:
            return error_response("create b2b product", e)

    @app.route("/api/b2b/products/<int:product_id>", methods=["GET"], endpoint="b2b_products_get")
    @login_required
    def b2b_products_get(product_id: int):
        try:
            return jsonify(container.run("b2b-products-get", lambda: products_b2b.get_product(product_id)).to_dict())
        except Exception as e:
            return error_response("fetch b2b product", e)

    @app.route("/api/b2b/products/<int:product_id>", methods=["PUT", "PATCH"], endpoint="b2b_products_update")
    @login_required
    def b2b_products_update(product_id: int):
        try:
            body = json_body()
            product = container.run("b2b-products-update", lambda: products_b2b.update_product(product_id, body))
            return jsonify(product.to_dict())
        except Exception as e:
            return error_response("update b2b product", e)

    @app.route("/api/b2b/products/<int:product_id>", methods=["DELETE"], endpoint="b2b_products_delete")
    @login_required
    def b2b_products_delete(product_id: int):
        try:
            container.run("b2b-products-delete", lambda: products_b2b.delete_product(product_id))
            return jsonify({"ok": True})
        except Exception as e:
            return error_response("delete b2b product", e)
