from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Ingredient, NewRecipeItem, PlanProduct, RecipeItem


class IngredientRepository(Protocol):
    def get(self, ingredient_id: int) -> Optional[Ingredient]:
        raise NotImplementedError

    def get_many(self, ingredient_ids: Iterable[int]) -> dict[int, Ingredient]:
        raise NotImplementedError

    def code_exists(self, code: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Ingredient]:
        """Newest first."""
        raise NotImplementedError

    def create(self, *, code: str, name: str, unit: str) -> Ingredient:
        raise NotImplementedError

    def update(self, ingredient_id: int, *, name: str, unit: str) -> Ingredient:
        raise NotImplementedError

    def delete(self, ingredient_id: int) -> bool:
        raise NotImplementedError


class PlanProductRepository(Protocol):
    def get(self, product_id: int) -> Optional[PlanProduct]:
        raise NotImplementedError

    def list_all(self) -> Sequence[PlanProduct]:
        """Newest first."""
        raise NotImplementedError

    def create(self, *, name: str) -> PlanProduct:
        raise NotImplementedError

    def update(self, product_id: int, *, name: str) -> PlanProduct:
        raise NotImplementedError

    def delete(self, product_id: int) -> bool:
        raise NotImplementedError


class RecipeRepository(Protocol):
    def list_all(self) -> Sequence[RecipeItem]:
        raise NotImplementedError

    def for_product(self, product_id: int) -> Sequence[RecipeItem]:
        raise NotImplementedError

    def replace(self, product_id: int, items: Sequence[NewRecipeItem]) -> Sequence[RecipeItem]:
        raise NotImplementedError

    def clear(self, product_id: int) -> int:
        raise NotImplementedError

    def uses_product(self, product_id: int) -> bool:
        raise NotImplementedError

    def uses_ingredient(self, ingredient_id: int) -> bool:
        raise NotImplementedError
