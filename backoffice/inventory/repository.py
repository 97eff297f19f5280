from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..common.pagination import PageRequest
from ..core.enums import InventoryStatus, Location
from .model import InventoryFilter, InventoryItem, NewInventoryItem


class InventoryRepository(Protocol):
    """Repository interface for barcode-tracked stock."""

    def get_by_barcode(self, barcode: str) -> Optional[InventoryItem]:
        raise NotImplementedError

    def get_many(self, barcodes: Iterable[str]) -> dict[str, InventoryItem]:
        raise NotImplementedError

    def create_many(self, items: Sequence[NewInventoryItem]) -> list[InventoryItem]:
        raise NotImplementedError

    def delete(self, barcode: str) -> bool:
        raise NotImplementedError

    def set_status(self, barcodes: Iterable[str], status: InventoryStatus) -> int:
        raise NotImplementedError

    def move(self, barcode: str, location: Location) -> Optional[InventoryItem]:
        raise NotImplementedError

    def search(self, flt: InventoryFilter, page: PageRequest) -> tuple[list[InventoryItem], int]:
        """Newest first; returns (page items, total count)."""
        raise NotImplementedError

    def ready_counts(self) -> list[tuple[Location, int, int]]:
        """(location, product_id, count) for READY stock."""
        raise NotImplementedError

    def status_counts(self) -> list[tuple[Location, int, InventoryStatus, int]]:
        raise NotImplementedError

    def count_ready(self, product_id: int, location: Location) -> int:
        raise NotImplementedError

    def oldest_ready(self, product_id: int, location: Location, limit: int) -> list[InventoryItem]:
        raise NotImplementedError

    def delete_ready(self, product_id: int, location: Location) -> int:
        raise NotImplementedError
