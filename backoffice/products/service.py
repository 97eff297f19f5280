from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Optional, Sequence

from ..common.money import hpp_value
from ..common.validators import require_non_empty, require_number
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..sales.repository import SaleRepository
from .model import Product, ProductB2B
from .repository import ProductB2BRepository, ProductRepository


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ProductService:
    """Retail product catalogue.

    A price change is pushed down to existing sale items and their sale estimates.
    """

    def __init__(
        self,
        products: ProductRepository,
        sales: SaleRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._products = products
        self._sales = sales
        self._tx = transaction

    def list_products(self) -> Sequence[Product]:
        return self._products.list_all()

    def get_product(self, product_id: int) -> Product:
        product = self._products.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, body: dict) -> Product:
        code = body.get("code")
        name = body.get("name")
        if not code or not name or not _is_number(body.get("price")) or not _is_number(body.get("hppPct")):
            raise ValidationError("code, name, price and hppPct are required")
        code = require_non_empty(code, "code").upper()
        price = int(body["price"])
        pct = float(body["hppPct"])
        if self._products.get_by_code(code):
            raise ConflictError("Product code already exists")
        with self._tx():
            return self._products.create(
                code=code, name=name.strip(), price=price, hpp_pct=pct, hpp_value=hpp_value(price, pct)
            )

    def update_product(self, product_id: int, body: dict) -> Product:
        current = self.get_product(product_id)
        name = body["name"].strip() if isinstance(body.get("name"), str) and body["name"].strip() else current.name
        price = int(body["price"]) if _is_number(body.get("price")) else current.price
        pct = float(body["hppPct"]) if _is_number(body.get("hppPct")) else current.hpp_pct
        price_changed = price != current.price

        with self._tx():
            updated = self._products.update(
                product_id, name=name, price=price, hpp_pct=pct, hpp_value=hpp_value(price, pct)
            )
            if price_changed:
                for sale_id in self._sales.reprice_product_items(product_id, price):
                    self._sales.recompute_est_payout(sale_id)
        return updated

    def delete_product(self, product_id: int) -> None:
        self.get_product(product_id)
        if self._products.is_referenced(product_id):
            raise ConflictError("Product is still used by inventory, sales or orders")
        with self._tx():
            self._products.delete(product_id)


class ProductB2BService:
    """Wholesale/cafe catalogue; cost ratio is optional."""

    def __init__(
        self,
        products: ProductB2BRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._products = products
        self._tx = transaction

    def list_products(self) -> Sequence[ProductB2B]:
        return self._products.list_all()

    def get_product(self, product_id: int) -> ProductB2B:
        product = self._products.get_by_id(product_id)
        if not product:
            raise NotFoundError("B2B product not found")
        return product

    @staticmethod
    def _hpp(price: int, pct: Optional[float]) -> Optional[int]:
        return hpp_value(price, pct) if pct is not None else None

    def create_product(self, body: dict) -> ProductB2B:
        code = require_non_empty(body.get("code"), "code").upper()
        name = require_non_empty(body.get("name"), "name")
        price = int(require_number(body.get("price"), "price", minimum=0))
        pct = float(body["hppPct"]) if _is_number(body.get("hppPct")) else None
        if self._products.get_by_code(code):
            raise ConflictError("Product code already exists")
        with self._tx():
            return self._products.create(code=code, name=name, price=price, hpp_pct=pct, hpp_value=self._hpp(price, pct))

    def update_product(self, product_id: int, body: dict) -> ProductB2B:
        current = self.get_product(product_id)
        name = body["name"].strip() if isinstance(body.get("name"), str) and body["name"].strip() else current.name
        price = int(body["price"]) if _is_number(body.get("price")) else current.price
        if "hppPct" in body:
            pct = float(body["hppPct"]) if _is_number(body["hppPct"]) else None
        else:
            pct = current.hpp_pct
        with self._tx():
            return self._products.update(product_id, name=name, price=price, hpp_pct=pct, hpp_value=self._hpp(price, pct))

    def delete_product(self, product_id: int) -> None:
        self.get_product(product_id)
        if self._products.is_referenced(product_id):
            raise ConflictError("B2B product is still used by orders")
        with self._tx():
            self._products.delete(product_id)
