from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..common.pagination import PageRequest
from .model import NewSale, NewSaleItem, Sale, SaleFilter, SaleItem


class SaleRepository(Protocol):
    def get(self, sale_id: int) -> Optional[Sale]:
        raise NotImplementedError

    def search(self, flt: SaleFilter, page: PageRequest) -> tuple[list[Sale], int]:
        raise NotImplementedError

    def list_matching(self, flt: SaleFilter) -> Sequence[Sale]:
        """Every sale matching the filter, newest order date first."""
        raise NotImplementedError

    def list_between(self, start: datetime, end: datetime) -> Sequence[Sale]:
        """Sales with ``start <= orderDate <= end``."""
        raise NotImplementedError

    def create(self, sale: NewSale) -> Sale:
        raise NotImplementedError

    def update(self, sale_id: int, fields: dict[str, Any]) -> Optional[Sale]:
        """``fields`` keys are Sale attribute names."""
        raise NotImplementedError

    def delete(self, sale_id: int) -> bool:
        raise NotImplementedError

    def add_items(self, sale_id: int, items: Sequence[NewSaleItem]) -> list[SaleItem]:
        raise NotImplementedError

    def get_item(self, item_id: int) -> Optional[SaleItem]:
        raise NotImplementedError

    def update_item(self, item_id: int, *, status: Optional[str], price: Optional[int]) -> Optional[SaleItem]:
        raise NotImplementedError

    def delete_item(self, item_id: int) -> bool:
        raise NotImplementedError

    def reprice_product_items(self, product_id: int, price: int) -> list[int]:
        """Set every item of the product to ``price``; returns the affected sale ids."""
        raise NotImplementedError

    def recompute_est_payout(self, sale_id: int) -> int:
        raise NotImplementedError
