from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Optional

from ..common.datetime_utils import parse_datetime
from ..common.pagination import PageRequest
from ..common.validators import optional_int, require_int
from ..core.enums import DeliveryStatus, InventoryStatus, Location
from ..core.exceptions import ConflictError, NotFoundError, ShortageError, ValidationError
from ..inventory.repository import InventoryRepository
from ..orders.model import Order, order_total
from ..orders.repository import OrderRepository
from .model import Delivery, DeliveryResult, NewDelivery, NewDeliveryItem, Refund
from .repository import DeliveryRepository

logger = logging.getLogger(__name__)


class DeliveryService:
    """Fulfils orders from READY stock at the order's location.

    One order gets at most one delivery. When stock is short the caller must
    confirm with ``forceRefund``; the undelivered quantity is then removed from
    the order and reported back as refunds.
    """

    def __init__(
        self,
        deliveries: DeliveryRepository,
        orders: OrderRepository,
        inventory: InventoryRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._deliveries = deliveries
        self._orders = orders
        self._inventory = inventory
        self._tx = transaction

    def _requested(self, order: Order, raw_items: Any) -> dict[int, int]:
        if raw_items is None or raw_items == []:
            return {i.product_id: i.quantity for i in order.items}
        if not isinstance(raw_items, list):
            raise ValidationError("items must be a list")

        requested: dict[int, int] = {}
        for raw in raw_items:
            if not isinstance(raw, dict):
                raise ValidationError("items must be objects with productId and quantity")
            pid = require_int(raw.get("productId"), "productId", minimum=1)
            if order.item_for(pid) is None:
                raise ValidationError(f"Product {pid} is not in the order")
            requested[pid] = requested.get(pid, 0) + require_int(raw.get("quantity", 1), "quantity", minimum=1)

        for pid, qty in requested.items():
            ordered = order.item_for(pid).quantity
            if qty > ordered:
                raise ValidationError(f"Too many items for product {pid}. Ordered: {ordered}, requested: {qty}")
        return requested

    def create_delivery(self, body: dict) -> DeliveryResult:
        order_id = require_int(body.get("orderId"), "orderId", minimum=1)
        order = self._orders.get(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if order.has_deliveries:
            raise ConflictError("Order already has a delivery")

        requested = self._requested(order, body.get("items"))
        force = bool(body.get("forceRefund"))
        ongkir_actual = optional_int(body.get("ongkirActual"), "ongkirActual", minimum=0) or 0
        delivery_date = parse_datetime(body["deliveryDate"]) if body.get("deliveryDate") else None

        available = {pid: self._inventory.count_ready(pid, order.location) for pid in requested}
        shortages = [
            {
                "productId": pid,
                "name": order.item_for(pid).product_name,
                "code": order.item_for(pid).product_code,
                "requested": qty,
                "available": available[pid],
            }
            for pid, qty in requested.items()
            if available[pid] < qty
        ]
        if shortages and not force:
            raise ShortageError(shortages)

        to_deliver = {pid: min(qty, available[pid]) for pid, qty in requested.items()}
        if sum(to_deliver.values()) == 0:
            raise ValidationError("Nothing available to deliver for this order")

        with self._tx():
            lines: list[NewDeliveryItem] = []
            refunds: list[Refund] = []
            kept: list[tuple[int, int]] = []
            for item in order.items:
                qty = to_deliver.get(item.product_id, 0)
                if qty:
                    units = self._inventory.oldest_ready(item.product_id, order.location, qty)
                    lines.extend(NewDeliveryItem(item.product_id, u.barcode, item.price) for u in units)
                    qty = len(units)
                refunded = item.quantity - qty
                if refunded > 0:
                    refunds.append(Refund(item.product_id, item.product_name or "", item.product_code or "", refunded))
                    if qty == 0:
                        self._orders.delete_item(item.item_id)
                    else:
                        self._orders.set_item_quantity(item.item_id, qty)
                if qty:
                    kept.append((item.price, qty))

            self._inventory.set_status([line.barcode for line in lines], InventoryStatus.SOLD)
            if refunds:
                self._orders.set_total(order.order_id, order_total(kept, order.discount, order.ongkir_plan))

            delivery = self._deliveries.create(
                NewDelivery(
                    order_id=order.order_id,
                    status=DeliveryStatus.DELIVERED if delivery_date else DeliveryStatus.PENDING,
                    delivery_date=delivery_date,
                    ongkir_plan=order.ongkir_plan,
                    ongkir_actual=ongkir_actual,
                ),
                lines,
            )

        if refunds:
            logger.info(
                "delivery %s for order %s refunded %d unit(s)",
                delivery.delivery_id,
                order.order_id,
                sum(r.quantity for r in refunds),
            )
        return DeliveryResult(delivery=delivery, refunds=tuple(refunds))

    def list_deliveries(
        self, *, location: Optional[Location], search: Optional[str], page: PageRequest
    ) -> tuple[list[Delivery], int]:
        return self._deliveries.search(location=location, search=(search or "").strip() or None, page=page)

    def cancel_delivery(self, delivery_id: int) -> Delivery:
        """Put the barcodes back on the shelf and drop the delivery; the order becomes pending again."""
        delivery = self._deliveries.get(delivery_id)
        if not delivery:
            raise NotFoundError("Delivery not found")
        if delivery.status != DeliveryStatus.DELIVERED:
            raise ValidationError("Only delivered deliveries can be cancelled")
        with self._tx():
            self._inventory.set_status(delivery.barcodes, InventoryStatus.READY)
            self._deliveries.delete(delivery_id)
        return delivery
