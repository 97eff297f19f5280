from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import now_utc, parse_datetime
from ..common.money import apply_discount
from ..common.pagination import PageRequest
from ..common.validators import require_location, require_non_empty
from ..core.enums import InventoryStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..inventory.repository import InventoryRepository
from ..products.repository import ProductRepository
from .model import (
    CAFE_ITEM_STATUS,
    DISCOUNTED_OUTLETS,
    NewSale,
    NewSaleItem,
    Sale,
    SaleFilter,
    SaleItem,
    default_status_for_outlet,
)
from .repository import SaleRepository


def _number(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == value:
        return value
    return None


def _int_or_none(value: Any) -> Optional[int]:
    number = _number(value)
    return int(round(number)) if number is not None else None


class SaleService:
    """Use cases for retail/marketplace/cafe sales backed by barcode stock."""

    def __init__(
        self,
        sales: SaleRepository,
        inventory: InventoryRepository,
        products: ProductRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._sales = sales
        self._inventory = inventory
        self._products = products
        self._tx = transaction

    def _ready_items(self, barcodes: Sequence[str], location) -> list:
        codes = [str(b).strip().upper() for b in barcodes]
        if len(set(codes)) != len(codes):
            raise ValidationError("Duplicate barcodes in request")
        found = self._inventory.get_many(codes)
        missing = [c for c in codes if c not in found]
        if missing:
            raise NotFoundError(f"Barcode not in inventory: {', '.join(missing)}")
        bad = [c for c in codes if not found[c].is_ready or found[c].location != location]
        if bad:
            raise ConflictError("Some barcodes are not READY at the specified location", payload={"barcodes": bad})
        return [found[c] for c in codes]

    def _price_of(self, item) -> int:
        if item.product:
            return item.product.price
        product = self._products.get_by_id(item.product_id)
        return product.price if product else 0

    def create_sale(self, body: dict) -> Sale:
        outlet = require_non_empty(body.get("outlet"), "outlet")
        location = require_location(body.get("location"))
        barcodes = body.get("items") or body.get("barcodes") or []
        if not isinstance(barcodes, list):
            raise ValidationError("items must be a list of barcodes")

        discount = _number(body.get("discount"))
        actual = _int_or_none(body.get("actualReceived"))
        if actual is None:
            actual = _int_or_none(body.get("actPayout"))
        order_date = parse_datetime(body["orderDate"]) if body.get("orderDate") else now_utc()
        ship_date = parse_datetime(body["shipDate"]) if body.get("shipDate") else None
        status = body.get("status") or default_status_for_outlet(outlet)
        is_cafe = outlet.lower() == "cafe"

        with self._tx():
            if not barcodes:
                return self._sales.create(
                    NewSale(
                        outlet=outlet,
                        location=location,
                        order_date=order_date,
                        customer=body.get("customer") or None,
                        status=status,
                        ship_date=ship_date,
                        discount=discount,
                        est_payout=None,
                        act_payout=actual,
                    )
                )

            stock = self._ready_items(barcodes, location)
            priced = [(item, self._price_of(item)) for item in stock]
            est = sum(price for _, price in priced)
            if actual is None and outlet.lower() in DISCOUNTED_OUTLETS:
                actual = apply_discount(est, discount)

            sale = self._sales.create(
                NewSale(
                    outlet=outlet,
                    location=location,
                    order_date=order_date,
                    customer=body.get("customer") or None,
                    status=status,
                    ship_date=ship_date,
                    discount=discount,
                    est_payout=est,
                    act_payout=actual,
                )
            )
            self._sales.add_items(
                sale.sale_id,
                [
                    NewSaleItem(
                        product_id=item.product_id,
                        barcode=item.barcode,
                        price=price,
                        status=CAFE_ITEM_STATUS if is_cafe else None,
                    )
                    for item, price in priced
                ],
            )
            self._inventory.set_status([i.barcode for i in stock], InventoryStatus.SOLD)
        return self._sales.get(sale.sale_id)

    def get_sale(self, sale_id: int) -> Sale:
        sale = self._sales.get(sale_id)
        if not sale:
            raise NotFoundError("Sale not found")
        return sale

    def list_sales(self, flt: SaleFilter, page: PageRequest) -> tuple[list[Sale], int]:
        return self._sales.search(flt, page)

    def update_sale(self, sale_id: int, body: dict) -> Sale:
        fields: dict[str, Any] = {}
        for key in ("outlet", "customer", "status"):
            if key in body:
                fields[key] = body[key]
        if "location" in body:
            fields["location"] = require_location(body["location"])
        if body.get("orderDate"):
            fields["order_date"] = parse_datetime(body["orderDate"])
        if "shipDate" in body:
            fields["ship_date"] = parse_datetime(body["shipDate"]) if body["shipDate"] else None
        for key, attr in (
            ("estPayout", "est_payout"),
            ("actPayout", "act_payout"),
            ("actualReceived", "actual_received"),
        ):
            if key in body:
                fields[attr] = _int_or_none(body[key])
        if "discount" in body:
            fields["discount"] = _number(body["discount"])

        with self._tx():
            sale = self._sales.update(sale_id, fields)
        if not sale:
            raise NotFoundError("Sale not found")
        return sale

    def delete_sale(self, sale_id: int) -> None:
        """Delete a sale; its barcodes go back to READY."""
        sale = self.get_sale(sale_id)
        with self._tx():
            self._inventory.set_status([i.barcode for i in sale.items], InventoryStatus.READY)
            self._sales.delete(sale_id)

    def add_item(self, sale_id: int, *, barcode: str, status: Optional[str] = None) -> SaleItem:
        code = require_non_empty(barcode, "barcode").upper()
        item = self._inventory.get_by_barcode(code)
        if not item:
            raise NotFoundError("Barcode not in inventory")
        if not item.is_ready:
            raise ConflictError("Barcode not available (status not READY)")
        self.get_sale(sale_id)

        with self._tx():
            (created,) = self._sales.add_items(
                sale_id,
                [NewSaleItem(product_id=item.product_id, barcode=item.barcode, price=self._price_of(item), status=status)],
            )
            self._inventory.set_status([item.barcode], InventoryStatus.SOLD)
            self._sales.recompute_est_payout(sale_id)
        return created

    def list_items(self, sale_id: int) -> Sequence[SaleItem]:
        return self.get_sale(sale_id).items

    def update_item(self, item_id: int, body: dict) -> SaleItem:
        status = body.get("status") if isinstance(body.get("status"), str) else None
        price = _int_or_none(body.get("price"))
        with self._tx():
            item = self._sales.update_item(item_id, status=status, price=price)
            if not item:
                raise NotFoundError("Sale item not found")
            if price is not None:
                self._sales.recompute_est_payout(item.sale_id)
        return item

    def delete_item(self, item_id: int) -> SaleItem:
        """Remove an item from its sale; the barcode goes back to READY."""
        item = self._sales.get_item(item_id)
        if not item:
            raise NotFoundError("Sale item not found")
        with self._tx():
            self._sales.delete_item(item_id)
            self._inventory.set_status([item.barcode], InventoryStatus.READY)
            self._sales.recompute_est_payout(item.sale_id)
        return item

    def estimate(self, body: dict) -> dict:
        """Price preview; the discount only applies to whatsapp and cafe."""
        barcodes = body.get("barcodes") or body.get("items") or []
        if not isinstance(barcodes, list) or not barcodes:
            return {"subtotal": 0, "discountPct": 0, "total": 0}
        codes = [str(b).strip().upper() for b in barcodes]
        location = body.get("location")
        found = self._inventory.get_many(codes)
        subtotal = sum(
            self._price_of(item)
            for item in found.values()
            if item.is_ready and (not location or item.location.value == location)
        )
        outlet = str(body.get("outlet") or "").lower()
        pct = _number(body.get("discount")) if outlet in DISCOUNTED_OUTLETS else 0
        pct = pct or 0
        return {"subtotal": subtotal, "discountPct": pct, "total": apply_discount(subtotal, pct)}
