from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import B2BItemSource, B2BOutlet, Location


@dataclass(frozen=True)
class B2BOrderItem:
    item_id: int
    source: B2BItemSource
    quantity: int
    price: int
    product_b2b_id: Optional[int] = None
    product_id: Optional[int] = None
    barcodes: tuple[str, ...] = ()
    product_code: Optional[str] = None
    product_name: Optional[str] = None

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "source": self.source.value,
            "productB2BId": self.product_b2b_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "barcodes": list(self.barcodes),
            "product": {"code": self.product_code, "name": self.product_name},
        }


@dataclass(frozen=True)
class B2BOrder:
    order_id: int
    outlet: B2BOutlet
    order_date: datetime
    location: Location
    total_amount: int
    customer: Optional[str] = None
    discount: Optional[float] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    items: tuple[B2BOrderItem, ...] = field(default_factory=tuple)

    @property
    def retail_barcodes(self) -> list[str]:
        return [code for i in self.items if i.source == B2BItemSource.RETAIL for code in i.barcodes]

    def to_dict(self) -> dict:
        return {
            "id": self.order_id,
            "outlet": self.outlet.value,
            "customer": self.customer,
            "orderDate": iso(self.order_date),
            "location": self.location.value,
            "discount": self.discount,
            "status": self.status,
            "notes": self.notes,
            "totalAmount": self.total_amount,
            "createdAt": iso(self.created_at),
            "items": [i.to_dict() for i in self.items],
        }


@dataclass(frozen=True)
class NewB2BItem:
    source: B2BItemSource
    quantity: int
    price: int
    product_b2b_id: Optional[int] = None
    product_id: Optional[int] = None
    barcodes: tuple[str, ...] = ()


@dataclass(frozen=True)
class B2BOrderDraft:
    outlet: B2BOutlet
    customer: Optional[str]
    order_date: datetime
    location: Location
    discount: Optional[float]
    status: Optional[str]
    notes: Optional[str]
    total_amount: int


@dataclass(frozen=True)
class B2BOrderFilter:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    outlet: Optional[B2BOutlet] = None
    location: Optional[Location] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class BarcodeCheck:
    barcode: str
    ok: bool
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"barcode": self.barcode, "ok": self.ok}
        if self.reason:
            data["reason"] = self.reason
        return data
