from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.pagination import PageRequest
from .model import B2BOrder, B2BOrderDraft, B2BOrderFilter, NewB2BItem


class B2BOrderRepository(Protocol):
    def get(self, order_id: int) -> Optional[B2BOrder]:
        raise NotImplementedError

    def search(self, flt: B2BOrderFilter, page: PageRequest) -> tuple[list[B2BOrder], int]:
        raise NotImplementedError

    def list_matching(self, flt: B2BOrderFilter) -> Sequence[B2BOrder]:
        """Every order matching the filter, newest order date first."""
        raise NotImplementedError

    def create(self, draft: B2BOrderDraft, items: Sequence[NewB2BItem]) -> B2BOrder:
        raise NotImplementedError

    def replace(self, order_id: int, draft: B2BOrderDraft, items: Sequence[NewB2BItem]) -> B2BOrder:
        raise NotImplementedError

    def delete(self, order_id: int) -> bool:
        raise NotImplementedError
