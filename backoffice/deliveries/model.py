from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import DeliveryStatus, Location


@dataclass(frozen=True)
class DeliveryItem:
    item_id: int
    product_id: int
    barcode: str
    price: int
    product_code: Optional[str] = None
    product_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "productId": self.product_id,
            "barcode": self.barcode,
            "price": self.price,
            "product": {"id": self.product_id, "code": self.product_code, "name": self.product_name},
        }


@dataclass(frozen=True)
class Delivery:
    delivery_id: int
    order_id: int
    status: DeliveryStatus
    delivery_date: Optional[datetime] = None
    ongkir_plan: int = 0
    ongkir_actual: int = 0
    created_at: Optional[datetime] = None
    items: tuple[DeliveryItem, ...] = field(default_factory=tuple)
    # denormalized from the order for listings
    outlet: Optional[str] = None
    customer: Optional[str] = None
    location: Optional[Location] = None

    @property
    def barcodes(self) -> list[str]:
        return [i.barcode for i in self.items]

    def to_dict(self) -> dict:
        return {
            "id": self.delivery_id,
            "orderId": self.order_id,
            "deliveryDate": iso(self.delivery_date),
            "status": self.status.value,
            "ongkirPlan": self.ongkir_plan,
            "ongkirActual": self.ongkir_actual,
            "createdAt": iso(self.created_at),
            "order": {
                "id": self.order_id,
                "outlet": self.outlet,
                "customer": self.customer,
                "location": self.location.value if self.location else None,
            },
            "items": [i.to_dict() for i in self.items],
        }


@dataclass(frozen=True)
class NewDelivery:
    order_id: int
    status: DeliveryStatus
    delivery_date: Optional[datetime]
    ongkir_plan: int
    ongkir_actual: int


@dataclass(frozen=True)
class NewDeliveryItem:
    product_id: int
    barcode: str
    price: int


@dataclass(frozen=True)
class Refund:
    product_id: int
    name: str
    code: str
    quantity: int

    def to_dict(self) -> dict:
        return {"productId": self.product_id, "name": self.name, "code": self.code, "quantity": self.quantity}


@dataclass(frozen=True)
class DeliveryResult:
    delivery: Delivery
    refunds: tuple[Refund, ...] = ()

    def to_dict(self) -> dict:
        data = self.delivery.to_dict()
        data["refunds"] = [r.to_dict() for r in self.refunds]
        return data
