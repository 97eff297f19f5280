from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Iterable, Optional

from ..common.datetime_utils import parse_datetime
from ..common.money import apply_discount
from ..common.pagination import PageRequest
from ..common.validators import optional_int, require_int, require_location, require_number
from ..core.enums import B2BItemSource, B2BOutlet, InventoryStatus, Location
from ..core.exceptions import NotFoundError, ValidationError
from ..inventory.repository import InventoryRepository
from ..products.repository import ProductB2BRepository, ProductRepository
from .model import B2BOrder, B2BOrderDraft, B2BOrderFilter, BarcodeCheck, NewB2BItem
from .repository import B2BOrderRepository


def normalize_barcodes(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    return [str(code).strip().upper() for code in raw if str(code or "").strip()]


class B2BOrderService:
    """Wholesale and café orders mixing B2B catalogue lines with retail barcodes."""

    def __init__(
        self,
        orders: B2BOrderRepository,
        products_b2b: ProductB2BRepository,
        products: ProductRepository,
        inventory: InventoryRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._orders = orders
        self._products_b2b = products_b2b
        self._products = products
        self._inventory = inventory
        self._tx = transaction

    def check_barcodes(self, location: Location, product_id: int, barcodes: Iterable[str]) -> list[BarcodeCheck]:
        codes = list(barcodes)
        found = self._inventory.get_many(codes)
        seen: set[str] = set()
        results = []
        for code in codes:
            item = found.get(code)
            if code in seen:
                results.append(BarcodeCheck(code, False, "Duplicate barcode"))
            elif item is None:
                results.append(BarcodeCheck(code, False, "Barcode not found"))
            elif not item.is_ready:
                results.append(BarcodeCheck(code, False, "Barcode is not READY"))
            elif item.location != location:
                results.append(BarcodeCheck(code, False, f"Barcode is not at {location.value}"))
            elif item.product_id != product_id:
                results.append(BarcodeCheck(code, False, "Barcode belongs to a different product"))
            else:
                results.append(BarcodeCheck(code, True))
            seen.add(code)
        return results

    def validate_barcodes(self, body: dict) -> dict:
        location = require_location(body.get("location"))
        product_id = require_int(body.get("productId"), "productId", minimum=1)
        codes = normalize_barcodes(body.get("barcodes"))
        if not codes:
            raise ValidationError("barcodes are required")
        results = self.check_barcodes(location, product_id, codes)
        return {"valid": all(r.ok for r in results), "results": [r.to_dict() for r in results]}

    def _build(self, body: dict) -> tuple[B2BOrderDraft, list[NewB2BItem]]:
        try:
            outlet = B2BOutlet(str(body.get("outlet") or "").strip())
        except ValueError:
            raise ValidationError("Outlet must be Wholesale or Cafe")
        location = require_location(body.get("location"))
        if not body.get("orderDate"):
            raise ValidationError("orderDate is required")
        order_date = parse_datetime(body["orderDate"])
        raw_items = body.get("items") or []
        if not isinstance(raw_items, list) or not raw_items:
            raise ValidationError("at least one item is required")

        discount = None
        if body.get("discount") not in (None, ""):
            discount = require_number(body.get("discount"), "discount", minimum=0)
            if discount > 100:
                raise ValidationError("discount must be between 0 and 100")

        items: list[NewB2BItem] = []
        claimed: set[str] = set()
        for raw in raw_items:
            if not isinstance(raw, dict):
                raise ValidationError("items must be objects")
            source_raw = str(raw.get("source") or raw.get("productSource") or "B2B").strip().upper()
            quantity = require_int(raw.get("quantity"), "quantity", minimum=1)
            if source_raw == "RETAIL":
                items.append(self._retail_item(raw, quantity, location, claimed))
            elif source_raw == "B2B":
                items.append(self._b2b_item(raw, quantity))
            else:
                raise ValidationError("source must be B2B or Retail")

        subtotal = sum(i.price * i.quantity for i in items)
        draft = B2BOrderDraft(
            outlet=outlet,
            customer=(body.get("customer") or "").strip() or None,
            order_date=order_date,
            location=location,
            discount=discount,
            status=(body.get("status") or "PAID"),
            notes=body.get("notes") or None,
            total_amount=apply_discount(subtotal, discount),
        )
        return draft, items

    def _b2b_item(self, raw: dict, quantity: int) -> NewB2BItem:
        pid = require_int(raw.get("productB2BId", raw.get("productId")), "productB2BId", minimum=1)
        product = self._products_b2b.get_by_id(pid)
        if not product:
            raise ValidationError(f"Product B2B {pid} not found")
        price = optional_int(raw.get("price"), "price", minimum=0)
        return NewB2BItem(
            source=B2BItemSource.B2B,
            quantity=quantity,
            price=product.price if price is None else price,
            product_b2b_id=pid,
        )

    def _retail_item(self, raw: dict, quantity: int, location: Location, claimed: set[str]) -> NewB2BItem:
        pid = require_int(raw.get("productId"), "productId", minimum=1)
        product = self._products.get_by_id(pid)
        if not product:
            raise ValidationError(f"Product retail {pid} not found")
        codes = normalize_barcodes(raw.get("barcodes", raw.get("barcode")))
        if len(codes) != quantity:
            raise ValidationError(f"Barcode count must equal quantity ({quantity}) for retail items")
        for check in self.check_barcodes(location, pid, codes):
            if not check.ok or check.barcode in claimed:
                raise ValidationError(f"Barcode {check.barcode}: {check.reason or 'Duplicate barcode'}")
            claimed.add(check.barcode)
        return NewB2BItem(
            source=B2BItemSource.RETAIL, quantity=quantity, price=product.price, product_id=pid, barcodes=tuple(codes)
        )

    def create_order(self, body: dict) -> B2BOrder:
        draft, items = self._build(body)
        with self._tx():
            order = self._orders.create(draft, items)
            self._inventory.set_status([c for i in items for c in i.barcodes], InventoryStatus.SOLD)
        return order

    def get_order(self, order_id: int) -> B2BOrder:
        order = self._orders.get(order_id)
        if not order:
            raise NotFoundError("B2B order not found")
        return order

    def update_order(self, order_id: int, body: dict) -> B2BOrder:
        previous = self.get_order(order_id)
        with self._tx():
            # previous barcodes become available again before the new lines are checked
            self._inventory.set_status(previous.retail_barcodes, InventoryStatus.READY)
            draft, items = self._build(body)
            order = self._orders.replace(order_id, draft, items)
            self._inventory.set_status([c for i in items for c in i.barcodes], InventoryStatus.SOLD)
        return order

    def delete_order(self, order_id: int) -> None:
        previous = self.get_order(order_id)
        with self._tx():
            self._inventory.set_status(previous.retail_barcodes, InventoryStatus.READY)
            self._orders.delete(order_id)

    def list_orders(self, flt: B2BOrderFilter, page: PageRequest) -> tuple[list[B2BOrder], int]:
        return self._orders.search(flt, page)

    @staticmethod
    def parse_outlet(value: Optional[str]) -> Optional[B2BOutlet]:
        if not value or value == "all":
            return None
        try:
            return B2BOutlet(value)
        except ValueError:
            raise ValidationError("Outlet must be Wholesale or Cafe")
