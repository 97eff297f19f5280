from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.constants import INGREDIENT_CODE_FALLBACK, INGREDIENT_CODE_MAX_LEN


@dataclass(frozen=True)
class Ingredient:
    ingredient_id: int
    code: str
    name: str
    unit: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.ingredient_id,
            "code": self.code,
            "name": self.name,
            "unit": self.unit,
            "createdAt": iso(self.created_at),
        }


@dataclass(frozen=True)
class PlanProduct:
    product_id: int
    name: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"id": self.product_id, "name": self.name, "createdAt": iso(self.created_at)}


@dataclass(frozen=True)
class RecipeItem:
    item_id: int
    product_id: int
    ingredient: Ingredient
    amount_per_kg: float
    unit: str

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "ingredient": {
                "id": self.ingredient.ingredient_id,
                "code": self.ingredient.code,
                "name": self.ingredient.name,
                "unit": self.ingredient.unit,
            },
            "amountPerKg": self.amount_per_kg,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class NewRecipeItem:
    ingredient_id: int
    amount_per_kg: float
    unit: str


def code_from_name(name: str) -> str:
    """ASCII-fold, upper-case and dash-join the name: "Gula Aren" -> "GULA-AREN"."""
    folded = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    code = re.sub(r"[^A-Z0-9]+", "-", folded.upper()).strip("-")
    code = code[:INGREDIENT_CODE_MAX_LEN].strip("-")
    return code or INGREDIENT_CODE_FALLBACK
