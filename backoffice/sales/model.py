from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import Location

DISCOUNTED_OUTLETS = ("whatsapp", "cafe")
CAFE_ITEM_STATUS = "Display"
CAFE_SOLD_STATUS = "Terjual"


def default_status_for_outlet(outlet: str) -> str:
    key = (outlet or "").lower()
    if key == "wholesale":
        return "shipping"
    if key == "cafe":
        return "Display"
    return "ordered"


@dataclass(frozen=True)
class SaleItem:
    item_id: int
    sale_id: int
    product_id: int
    barcode: str
    price: int
    status: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "saleId": self.sale_id,
            "productId": self.product_id,
            "barcode": self.barcode,
            "price": self.price,
            "status": self.status,
        }


@dataclass(frozen=True)
class Sale:
    sale_id: int
    outlet: str
    location: Location
    order_date: datetime
    customer: Optional[str] = None
    status: Optional[str] = None
    ship_date: Optional[datetime] = None
    discount: Optional[float] = None
    est_payout: Optional[int] = None
    act_payout: Optional[int] = None
    actual_received: Optional[int] = None
    created_at: Optional[datetime] = None
    items: tuple[SaleItem, ...] = field(default_factory=tuple)

    @property
    def items_total(self) -> int:
        return sum(i.price for i in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.sale_id,
            "outlet": self.outlet,
            "customer": self.customer,
            "status": self.status,
            "orderDate": iso(self.order_date),
            "shipDate": iso(self.ship_date),
            "location": self.location.value,
            "discount": self.discount,
            "estPayout": self.est_payout,
            "actPayout": self.act_payout,
            "actualReceived": self.actual_received,
            "createdAt": iso(self.created_at),
            "items": [i.to_dict() for i in self.items],
        }


@dataclass(frozen=True)
class NewSale:
    outlet: str
    location: Location
    order_date: datetime
    customer: Optional[str]
    status: str
    ship_date: Optional[datetime]
    discount: Optional[float]
    est_payout: Optional[int]
    act_payout: Optional[int]


@dataclass(frozen=True)
class NewSaleItem:
    product_id: int
    barcode: str
    price: int
    status: Optional[str] = None


@dataclass(frozen=True)
class SaleFilter:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    outlet: Optional[str] = None
    location: Optional[Location] = None
