from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Sequence

from ..common.validators import require_int, require_non_empty, require_number
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Ingredient, NewRecipeItem, PlanProduct, RecipeItem, code_from_name
from .repository import IngredientRepository, PlanProductRepository, RecipeRepository

MAX_CODE_SUFFIX = 99


class PlanningService:
    """Production planning catalogue: ingredients, plan products and per-kg recipes."""

    def __init__(
        self,
        ingredients: IngredientRepository,
        plan_products: PlanProductRepository,
        recipes: RecipeRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._ingredients = ingredients
        self._plan_products = plan_products
        self._recipes = recipes
        self._tx = transaction

    # ingredients

    def _unique_code(self, base: str) -> str:
        if not self._ingredients.code_exists(base):
            return base
        for n in range(1, MAX_CODE_SUFFIX + 1):
            candidate = f"{base}-{n:02d}"
            if not self._ingredients.code_exists(candidate):
                return candidate
        raise ConflictError(f"No free ingredient code left for {base}")

    def list_ingredients(self) -> list[Ingredient]:
        return list(self._ingredients.list_all())

    def create_ingredient(self, body: dict) -> Ingredient:
        name = require_non_empty(body.get("name"), "name")
        unit = require_non_empty(body.get("unit"), "unit")
        explicit = (body.get("code") or "").strip().upper()
        if explicit and self._ingredients.code_exists(explicit):
            raise ConflictError("Ingredient code already exists")
        code = explicit or self._unique_code(code_from_name(name))
        with self._tx():
            return self._ingredients.create(code=code, name=name, unit=unit)

    def update_ingredient(self, ingredient_id: int, body: dict) -> Ingredient:
        if not self._ingredients.get(ingredient_id):
            raise NotFoundError("Ingredient not found")
        name = require_non_empty(body.get("name"), "name")
        unit = require_non_empty(body.get("unit"), "unit")
        with self._tx():
            return self._ingredients.update(ingredient_id, name=name, unit=unit)

    def delete_ingredient(self, ingredient_id: int) -> None:
        if not self._ingredients.get(ingredient_id):
            raise NotFoundError("Ingredient not found")
        if self._recipes.uses_ingredient(ingredient_id):
            raise ConflictError("Ingredient is used in a recipe")
        with self._tx():
            self._ingredients.delete(ingredient_id)

    # plan products

    def list_plan_products(self) -> list[PlanProduct]:
        return list(self._plan_products.list_all())

    def get_plan_product(self, product_id: int) -> PlanProduct:
        product = self._plan_products.get(product_id)
        if not product:
            raise NotFoundError("Plan product not found")
        return product

    def create_plan_product(self, body: dict) -> PlanProduct:
        name = require_non_empty(body.get("name"), "name")
        with self._tx():
            return self._plan_products.create(name=name)

    def update_plan_product(self, product_id: int, body: dict) -> PlanProduct:
        self.get_plan_product(product_id)
        name = require_non_empty(body.get("name"), "name")
        with self._tx():
            return self._plan_products.update(product_id, name=name)

    def delete_plan_product(self, product_id: int) -> None:
        self.get_plan_product(product_id)
        if self._recipes.uses_product(product_id):
            raise ValidationError("Plan product still has recipe items")
        with self._tx():
            self._plan_products.delete(product_id)

    # recipes

    def list_recipes(self) -> list[dict]:
        """Recipes grouped per plan product, products without items included."""
        grouped: dict[int, list[RecipeItem]] = {}
        for item in self._recipes.list_all():
            grouped.setdefault(item.product_id, []).append(item)
        return [
            {"product": p.to_dict(), "items": [i.to_dict() for i in grouped.get(p.product_id, [])]}
            for p in self._plan_products.list_all()
        ]

    def get_recipe(self, product_id: int) -> list[RecipeItem]:
        self.get_plan_product(product_id)
        return list(self._recipes.for_product(product_id))

    def _parse_items(self, raw: Any) -> list[NewRecipeItem]:
        if not isinstance(raw, list) or not raw:
            raise ValidationError("items are required")
        items = []
        for entry in raw:
            if not isinstance(entry, dict):
                raise ValidationError("items must be objects")
            items.append(
                NewRecipeItem(
                    ingredient_id=require_int(entry.get("ingredientId"), "ingredientId", minimum=1),
                    amount_per_kg=require_number(entry.get("amountPerKg"), "amountPerKg", minimum=0),
                    unit=require_non_empty(entry.get("unit"), "unit"),
                )
            )
        known = self._ingredients.get_many(i.ingredient_id for i in items)
        missing = sorted({i.ingredient_id for i in items} - set(known))
        if missing:
            raise ValidationError(f"Ingredient not found: {', '.join(str(m) for m in missing)}")
        return items

    def save_recipe(self, product_id: int, raw_items: Any) -> Sequence[RecipeItem]:
        self.get_plan_product(product_id)
        items = self._parse_items(raw_items)
        with self._tx():
            return self._recipes.replace(product_id, items)

    def clear_recipe(self, product_id: int) -> int:
        self.get_plan_product(product_id)
        with self._tx():
            return self._recipes.clear(product_id)
