from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.extensions import db
from ..database.models import IngredientRow, PlanProductRow, RecipeItemRow
from .model import Ingredient, NewRecipeItem, PlanProduct, RecipeItem


def to_ingredient(row: IngredientRow) -> Ingredient:
    return Ingredient(
        ingredient_id=int(row.id), code=row.code, name=row.name, unit=row.unit, created_at=row.created_at
    )


def to_plan_product(row: PlanProductRow) -> PlanProduct:
    return PlanProduct(product_id=int(row.id), name=row.name, created_at=row.created_at)


def to_recipe_item(row: RecipeItemRow) -> RecipeItem:
    return RecipeItem(
        item_id=int(row.id),
        product_id=int(row.product_id),
        ingredient=to_ingredient(row.ingredient),
        amount_per_kg=float(row.amount_per_kg),
        unit=row.unit,
    )


class SqlIngredientRepository:
    def get(self, ingredient_id: int) -> Optional[Ingredient]:
        row = db.session.get(IngredientRow, ingredient_id)
        return to_ingredient(row) if row else None

    def get_many(self, ingredient_ids: Iterable[int]) -> dict[int, Ingredient]:
        ids = list(set(ingredient_ids))
        if not ids:
            return {}
        return {r.id: to_ingredient(r) for r in IngredientRow.query.filter(IngredientRow.id.in_(ids)).all()}

    def code_exists(self, code: str) -> bool:
        return IngredientRow.query.filter_by(code=code).first() is not None

    def list_all(self) -> Sequence[Ingredient]:
        return [to_ingredient(r) for r in IngredientRow.query.order_by(IngredientRow.id.desc()).all()]

    def create(self, *, code: str, name: str, unit: str) -> Ingredient:
        row = IngredientRow(code=code, name=name, unit=unit)
        db.session.add(row)
        db.session.flush()
        return to_ingredient(row)

    def update(self, ingredient_id: int, *, name: str, unit: str) -> Ingredient:
        row = db.session.get(IngredientRow, ingredient_id)
        row.name = name
        row.unit = unit
        db.session.flush()
        return to_ingredient(row)

    def delete(self, ingredient_id: int) -> bool:
        return IngredientRow.query.filter_by(id=ingredient_id).delete(synchronize_session=False) > 0


class SqlPlanProductRepository:
    def get(self, product_id: int) -> Optional[PlanProduct]:
        row = db.session.get(PlanProductRow, product_id)
        return to_plan_product(row) if row else None

    def list_all(self) -> Sequence[PlanProduct]:
        return [to_plan_product(r) for r in PlanProductRow.query.order_by(PlanProductRow.id.desc()).all()]

    def create(self, *, name: str) -> PlanProduct:
        row = PlanProductRow(name=name)
        db.session.add(row)
        db.session.flush()
        return to_plan_product(row)

    def update(self, product_id: int, *, name: str) -> PlanProduct:
        row = db.session.get(PlanProductRow, product_id)
        row.name = name
        db.session.flush()
        return to_plan_product(row)

    def delete(self, product_id: int) -> bool:
        return PlanProductRow.query.filter_by(id=product_id).delete(synchronize_session=False) > 0


class SqlRecipeRepository:
    def list_all(self) -> Sequence[RecipeItem]:
        rows = RecipeItemRow.query.order_by(RecipeItemRow.product_id.asc(), RecipeItemRow.id.asc()).all()
        return [to_recipe_item(r) for r in rows]

    def for_product(self, product_id: int) -> Sequence[RecipeItem]:
        rows = RecipeItemRow.query.filter_by(product_id=product_id).order_by(RecipeItemRow.id.asc()).all()
        return [to_recipe_item(r) for r in rows]

    def replace(self, product_id: int, items: Sequence[NewRecipeItem]) -> Sequence[RecipeItem]:
        self.clear(product_id)
        db.session.add_all(
            [
                RecipeItemRow(
                    product_id=product_id, ingredient_id=i.ingredient_id, amount_per_kg=i.amount_per_kg, unit=i.unit
                )
                for i in items
            ]
        )
        db.session.flush()
        return self.for_product(product_id)

    def clear(self, product_id: int) -> int:
        deleted = RecipeItemRow.query.filter_by(product_id=product_id).delete(synchronize_session=False)
        db.session.expire_all()
        return deleted

    def uses_product(self, product_id: int) -> bool:
        return RecipeItemRow.query.filter_by(product_id=product_id).first() is not None

    def uses_ingredient(self, ingredient_id: int) -> bool:
        return RecipeItemRow.query.filter_by(ingredient_id=ingredient_id).first() is not None
