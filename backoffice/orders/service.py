from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Optional

from ..common.datetime_utils import jakarta_today, now_utc, parse_datetime, start_of_day_jakarta
from ..common.pagination import PageRequest
from ..common.validators import require_location, require_non_empty, require_int
from ..core.enums import Location, PaymentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..products.repository import ProductRepository
from .model import NewOrderItem, Order, OrderDraft, OrderFilter, effective_ongkir, order_total
from .repository import OrderRepository


def _optional_number(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")
    return value


class OrderService:
    """Delivery orders: created first, fulfilled later by a delivery."""

    def __init__(
        self,
        orders: OrderRepository,
        products: ProductRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._orders = orders
        self._products = products
        self._tx = transaction

    def _build(self, body: dict) -> tuple[OrderDraft, list[NewOrderItem]]:
        outlet = require_non_empty(body.get("outlet"), "outlet")
        location = require_location(body.get("location"))
        raw_items = body.get("items") or []
        if not isinstance(raw_items, list) or not raw_items:
            raise ValidationError("at least one item is required")

        quantities: dict[int, int] = {}
        for raw in raw_items:
            if not isinstance(raw, dict):
                raise ValidationError("items must be objects with productId and quantity")
            pid = require_int(raw.get("productId"), "productId", minimum=1)
            qty = require_int(raw.get("quantity"), "quantity", minimum=1)
            quantities[pid] = quantities.get(pid, 0) + qty

        products = self._products.get_many(quantities.keys())
        missing = sorted(pid for pid in quantities if pid not in products)
        if missing:
            raise ValidationError(
                f"Product not found: {', '.join(str(m) for m in missing)}", payload={"missingProductIds": missing}
            )

        order_date = parse_datetime(body["orderDate"]) if body.get("orderDate") else now_utc()
        delivery_date = parse_datetime(body["deliveryDate"]) if body.get("deliveryDate") else None
        if delivery_date and delivery_date < start_of_day_jakarta(jakarta_today(order_date)):
            raise ValidationError("deliveryDate cannot be before orderDate")

        self_pickup = bool(body.get("selfPickup"))
        ongkir_raw = _optional_number(body.get("ongkirPlan"), "ongkirPlan")
        if ongkir_raw is not None and ongkir_raw < 0:
            raise ValidationError("ongkirPlan must be >= 0")
        ongkir = effective_ongkir(outlet, self_pickup, int(ongkir_raw or 0))

        discount = _optional_number(body.get("discount"), "discount")
        if discount is not None and not 0 <= discount <= 100:
            raise ValidationError("discount must be between 0 and 100")

        items = [
            NewOrderItem(product_id=pid, quantity=qty, price=products[pid].price) for pid, qty in quantities.items()
        ]
        act_payout = _optional_number(body.get("actPayout"), "actPayout")
        draft = OrderDraft(
            outlet=outlet,
            customer=(body.get("customer") or "").strip(),
            status=PaymentStatus.normalize(body.get("status")),
            order_date=order_date,
            delivery_date=delivery_date,
            location=location,
            discount=discount,
            ongkir_plan=ongkir,
            self_pickup=self_pickup,
            total_amount=order_total(((i.price, i.quantity) for i in items), discount, ongkir),
            act_payout=int(act_payout) if act_payout else None,
            note=body.get("note") or None,
        )
        return draft, items

    def create_order(self, body: dict) -> Order:
        draft, items = self._build(body)
        with self._tx():
            return self._orders.create(draft, items)

    def get_order(self, order_id: int) -> Order:
        order = self._orders.get(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def update_order(self, order_id: int, body: dict) -> Order:
        order = self.get_order(order_id)
        if order.has_deliveries:
            raise ValidationError("Cannot edit order that has been delivered")
        draft, items = self._build(body)
        with self._tx():
            return self._orders.replace(order_id, draft, items)

    def delete_order(self, order_id: int) -> None:
        order = self.get_order(order_id)
        if order.has_deliveries:
            raise ValidationError("Cannot delete order that has been delivered")
        with self._tx():
            self._orders.delete(order_id)

    def list_orders(self, flt: OrderFilter, page: PageRequest) -> tuple[list[Order], int]:
        return self._orders.search(flt, page)

    def pending_orders(
        self, *, location: Optional[Location], search: Optional[str], page: PageRequest
    ) -> tuple[list[Order], int]:
        return self._orders.pending(location=location, search=(search or "").strip() or None, page=page)
