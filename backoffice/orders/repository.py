from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.pagination import PageRequest
from ..core.enums import Location
from .model import NewOrderItem, Order, OrderDraft, OrderFilter


class OrderRepository(Protocol):
    def get(self, order_id: int) -> Optional[Order]:
        raise NotImplementedError

    def search(self, flt: OrderFilter, page: PageRequest) -> tuple[list[Order], int]:
        """Newest first."""
        raise NotImplementedError

    def pending(
        self, *, location: Optional[Location], search: Optional[str], page: PageRequest
    ) -> tuple[list[Order], int]:
        """Orders without deliveries: deliveryDate asc (nulls last), orderDate, id."""
        raise NotImplementedError

    def list_between(self, start: datetime, end: datetime) -> Sequence[Order]:
        raise NotImplementedError

    def create(self, draft: OrderDraft, items: Sequence[NewOrderItem]) -> Order:
        raise NotImplementedError

    def replace(self, order_id: int, draft: OrderDraft, items: Sequence[NewOrderItem]) -> Order:
        """Overwrite header fields and replace all items."""
        raise NotImplementedError

    def delete(self, order_id: int) -> bool:
        raise NotImplementedError

    def set_item_quantity(self, item_id: int, quantity: int) -> None:
        raise NotImplementedError

    def delete_item(self, item_id: int) -> None:
        raise NotImplementedError

    def set_total(self, order_id: int, total_amount: int) -> None:
        raise NotImplementedError
