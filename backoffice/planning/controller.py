from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, login_required
from ..common.validators import require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.planning_service

    @app.route("/api/ingredients", methods=["GET"], endpoint="ingredients_list")
    @login_required
    def ingredients_list():
        try:
            rows = container.run("ingredients-list", svc.list_ingredients)
            return jsonify([i.to_dict() for i in rows])
        except Exception as e:
            return error_response("fetch ingredients", e)

    @app.route("/api/ingredients", methods=["POST"], endpoint="ingredients_create")
    @login_required
    def ingredients_create():
        try:
            body = json_body()
            return jsonify(container.run("ingredients-create", lambda: svc.create_ingredient(body)).to_dict()), 201
        except Exception as e:
            return error_response("create ingredient", e)

    @app.route("/api/ingredients/<int:ingredient_id>", methods=["PUT", "PATCH"], endpoint="ingredients_update")
    @login_required
    def ingredients_update(ingredient_id: int):
        try:
            body = json_body()
            return jsonify(
                container.run("ingredients-update", lambda: svc.update_ingredient(ingredient_id, body)).to_dict()
            )
        except Exception as e:
            return error_response("update ingredient", e)

    @app.route("/api/ingredients/<int:ingredient_id>", methods=["DELETE"], endpoint="ingredients_delete")
    @login_required
    def ingredients_delete(ingredient_id: int):
        try:
            container.run("ingredients-delete", lambda: svc.delete_ingredient(ingredient_id))
            return jsonify({"success": True})
        except Exception as e:
            return error_response("delete ingredient", e)

    @app.route("/api/plan-products", methods=["GET"], endpoint="plan_products_list")
    @login_required
    def plan_products_list():
        try:
            rows = container.run("plan-products-list", svc.list_plan_products)
            return jsonify([p.to_dict() for p in rows])
        except Exception as e:
            return error_response("fetch plan products", e)

    @app.route("/api/plan-products", methods=["POST"], endpoint="plan_products_create")
    @login_required
    def plan_products_create():
        try:
            body = json_body()
            return jsonify(container.run("plan-products-create", lambda: svc.create_plan_product(body)).to_dict()), 201
        except Exception as e:
            return error_response("create plan product", e)

    @app.route("/api/plan-products/<int:product_id>", methods=["GET"], endpoint="plan_products_get")
    @login_required
    def plan_products_get(product_id: int):
        try:
            return jsonify(container.run("plan-products-get", lambda: svc.get_plan_product(product_id)).to_dict())
        except Exception as e:
            return error_response("fetch plan product", e)

    @app.route("/api/plan-products/<int:product_id>", methods=["PUT", "PATCH"], endpoint="plan_products_update")
    @login_required
    def plan_products_update(product_id: int):
        try:
            body = json_body()
            return jsonify(
                container.run("plan-products-update", lambda: svc.update_plan_product(product_id, body)).to_dict()
            )
        except Exception as e:
            return error_response("update plan product", e)

    @app.route("/api/plan-products/<int:product_id>", methods=["DELETE"], endpoint="plan_products_delete")
    @login_required
    def plan_products_delete(product_id: int):
        try:
            container.run("plan-products-delete", lambda: svc.delete_plan_product(product_id))
            return jsonify({"success": True})
        except Exception as e:
            return error_response("delete plan product", e)

    @app.route("/api/recipes", methods=["GET"], endpoint="recipes_list")
    @login_required
    def recipes_list():
        try:
            return jsonify(container.run("recipes-list", svc.list_recipes))
        except Exception as e:
            return error_response("fetch recipes", e)

    @app.route("/api/recipes", methods=["POST"], endpoint="recipes_create")
    @login_required
    def recipes_create():
        try:
            body = json_body()
            product_id = require_int(body.get("productId"), "productId", minimum=1)
            items = container.run("recipes-save", lambda: svc.save_recipe(product_id, body.get("items")))
            return jsonify({"success": True, "items": [i.to_dict() for i in items]})
        except Exception as e:
            return error_response("save recipe", e)

    @app.route("/api/recipes/<int:product_id>", methods=["GET"], endpoint="recipes_get")
    @login_required
    def recipes_get(product_id: int):
        try:
            items = container.run("recipes-get", lambda: svc.get_recipe(product_id))
            return jsonify([i.to_dict() for i in items])
        except Exception as e:
            return error_response("fetch recipe", e)

    @app.route("/api/recipes/<int:product_id>", methods=["PUT"], endpoint="recipes_update")
    @login_required
    def recipes_update(product_id: int):
        try:
            body = json_body()
            items = container.run("recipes-save", lambda: svc.save_recipe(product_id, body.get("items")))
            return jsonify({"success": True, "items": [i.to_dict() for i in items]})
        except Exception as e:
            return error_response("save recipe", e)

    @app.route("/api/recipes/<int:product_id>", methods=["DELETE"], endpoint="recipes_delete")
    @login_required
    def recipes_delete(product_id: int):
        try:
            container.run("recipes-delete", lambda: svc.clear_recipe(product_id))
            return jsonify({"success": True})
        except Exception as e:
            return error_response("delete recipe", e)
