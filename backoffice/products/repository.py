from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Product, ProductB2B


class ProductRepository(Protocol):
    def get_by_id(self, product_id: int) -> Optional[Product]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Product]:
        raise NotImplementedError

    def get_many(self, product_ids: Iterable[int]) -> dict[int, Product]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Product]:
        raise NotImplementedError

    def create(self, *, code: str, name: str, price: int, hpp_pct: float, hpp_value: int) -> Product:
        raise NotImplementedError

    def update(self, product_id: int, *, name: str, price: int, hpp_pct: float, hpp_value: int) -> Product:
        raise NotImplementedError

    def delete(self, product_id: int) -> bool:
        raise NotImplementedError

    def is_referenced(self, product_id: int) -> bool:
        """True while inventory, sales or orders point at the product."""
        raise NotImplementedError


class ProductB2BRepository(Protocol):
    def get_by_id(self, product_id: int) -> Optional[ProductB2B]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[ProductB2B]:
        raise NotImplementedError

    def get_many(self, product_ids: Iterable[int]) -> dict[int, ProductB2B]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ProductB2B]:
        raise NotImplementedError

    def create(
        self, *, code: str, name: str, price: int, hpp_pct: Optional[float], hpp_value: Optional[int]
    ) -> ProductB2B:
        raise NotImplementedError

    def update(
        self, product_id: int, *, name: str, price: int, hpp_pct: Optional[float], hpp_value: Optional[int]
    ) -> ProductB2B:
        raise NotImplementedError

    def delete(self, product_id: int) -> bool:
        raise NotImplementedError

    def is_referenced(self, product_id: int) -> bool:
        raise NotImplementedError
