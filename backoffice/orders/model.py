from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import iso
from ..common.money import apply_discount
from ..core.enums import Location, PaymentStatus

SHIPPING_OUTLET = "whatsapp"


@dataclass(frozen=True)
class OrderItem:
    item_id: int
    product_id: int
    quantity: int
    price: int
    product_code: Optional[str] = None
    product_name: Optional[str] = None

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "product": {"id": self.product_id, "code": self.product_code, "name": self.product_name},
        }


@dataclass(frozen=True)
class DeliveryRef:
    delivery_id: int
    status: str
    ongkir_actual: int = 0
    ongkir_plan: int = 0


@dataclass(frozen=True)
class Order:
    """Delivery order: products to be fulfilled later from stock at ``location``."""

    order_id: int
    outlet: str
    customer: str
    status: PaymentStatus
    order_date: datetime
    location: Location
    total_amount: int
    delivery_date: Optional[datetime] = None
    discount: Optional[float] = None
    ongkir_plan: int = 0
    self_pickup: bool = False
    act_payout: Optional[int] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    deliveries: tuple[DeliveryRef, ...] = field(default_factory=tuple)

    @property
    def has_deliveries(self) -> bool:
        return bool(self.deliveries)

    @property
    def goods_total(self) -> int:
        """Discounted goods value without shipping."""
        return apply_discount(sum(i.line_total for i in self.items), self.discount)

    def item_for(self, product_id: int) -> Optional[OrderItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.order_id,
            "outlet": self.outlet,
            "customer": self.customer,
            "status": self.status.value,
            "orderDate": iso(self.order_date),
            "deliveryDate": iso(self.delivery_date),
            "location": self.location.value,
            "discount": self.discount,
            "ongkirPlan": self.ongkir_plan,
            "selfPickup": self.self_pickup,
            "totalAmount": self.total_amount,
            "actPayout": self.act_payout,
            "note": self.note,
            "createdAt": iso(self.created_at),
            "items": [i.to_dict() for i in self.items],
            "deliveries": [{"id": d.delivery_id, "status": d.status} for d in self.deliveries],
        }


@dataclass(frozen=True)
class NewOrderItem:
    product_id: int
    quantity: int
    price: int


@dataclass(frozen=True)
class OrderDraft:
    outlet: str
    customer: str
    status: PaymentStatus
    order_date: datetime
    delivery_date: Optional[datetime]
    location: Location
    discount: Optional[float]
    ongkir_plan: int
    self_pickup: bool
    total_amount: int
    act_payout: Optional[int]
    note: Optional[str] = None


@dataclass(frozen=True)
class OrderFilter:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    outlet: Optional[str] = None
    location: Optional[Location] = None


def order_total(lines: Iterable[tuple[int, int]], discount: Optional[float], ongkir_plan: int) -> int:
    """``lines`` are (price, quantity); shipping is added after the discount."""
    subtotal = sum(price * qty for price, qty in lines)
    return apply_discount(subtotal, discount) + int(ongkir_plan or 0)


def effective_ongkir(outlet: str, self_pickup: bool, ongkir_plan: Optional[int]) -> int:
    if self_pickup or (outlet or "").lower() != SHIPPING_OUTLET:
        return 0
    return int(ongkir_plan or 0)
