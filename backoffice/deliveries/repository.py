from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.pagination import PageRequest
from ..core.enums import Location
from .model import Delivery, NewDelivery, NewDeliveryItem


class DeliveryRepository(Protocol):
    def get(self, delivery_id: int) -> Optional[Delivery]:
        raise NotImplementedError

    def search(
        self, *, location: Optional[Location], search: Optional[str], page: PageRequest
    ) -> tuple[list[Delivery], int]:
        """Newest first; ``search`` matches the order's customer or outlet."""
        raise NotImplementedError

    def create(self, delivery: NewDelivery, items: Sequence[NewDeliveryItem]) -> Delivery:
        raise NotImplementedError

    def delete(self, delivery_id: int) -> bool:
        """Deletes the delivery together with its items."""
        raise NotImplementedError
