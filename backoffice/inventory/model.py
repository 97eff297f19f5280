from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import InventoryStatus, Location
from ..products.model import Product


@dataclass(frozen=True)
class InventoryItem:
    """One physical unit of stock, identified by its barcode."""

    item_id: int
    barcode: str
    location: Location
    product_id: int
    status: InventoryStatus
    created_at: Optional[datetime] = None
    product: Optional[Product] = None

    @property
    def is_ready(self) -> bool:
        return self.status == InventoryStatus.READY

    def to_dict(self) -> dict:
        data = {
            "id": self.item_id,
            "barcode": self.barcode,
            "location": self.location.value,
            "productId": self.product_id,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if self.product:
            data["product"] = {"code": self.product.code, "name": self.product.name, "price": self.product.price}
        return data


@dataclass(frozen=True)
class InventoryFilter:
    location: Optional[Location] = None
    product_code: Optional[str] = None
    status: Optional[InventoryStatus] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class NewInventoryItem:
    barcode: str
    location: Location
    product_id: int
    status: InventoryStatus = InventoryStatus.READY
