from __future__ import annotations

import secrets
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Optional

from ..common.barcode import parse_barcode
from ..common.datetime_utils import now_utc
from ..common.pagination import PageRequest, pagination_info
from ..common.validators import require_location, require_non_empty, require_number
from ..core.constants import AUTO_BARCODE_PREFIX
from ..core.enums import InventoryStatus, Location
from ..core.exceptions import ConflictError, GoneError, NotFoundError, ValidationError
from ..products.repository import ProductRepository
from .model import InventoryFilter, InventoryItem, NewInventoryItem
from .repository import InventoryRepository


@dataclass(frozen=True)
class StockSetResult:
    product_id: int
    location: Location
    quantity: int


class InventoryService:
    """Use cases: stock in, removal, transfer, listing and stock-take."""

    def __init__(
        self,
        inventory: InventoryRepository,
        products: ProductRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._inventory = inventory
        self._products = products
        self._tx = transaction

    def stock_in(self, *, barcode: str, location: Any) -> InventoryItem:
        parsed = parse_barcode(barcode)
        loc = require_location(location)

        product = self._products.get_by_code(parsed.master_code)
        if not product:
            raise NotFoundError(f"Product {parsed.master_code} not found")
        if self._inventory.get_by_barcode(parsed.normalized):
            raise ConflictError("Barcode already exists")

        with self._tx():
            (item,) = self._inventory.create_many(
                [NewInventoryItem(barcode=parsed.normalized, location=loc, product_id=product.product_id)]
            )
        return item

    def stock_out(self) -> None:
        raise GoneError("Stock out is retired; sell through sales or deliveries instead")

    def remove(self, barcode: str) -> None:
        code = require_non_empty(barcode, "barcode").upper()
        with self._tx():
            if not self._inventory.delete(code):
                raise NotFoundError("Barcode not found")

    def move(self, *, barcode: str, to_location: Any) -> InventoryItem:
        code = require_non_empty(barcode, "barcode").upper()
        loc = require_location(to_location, "toLocation")
        with self._tx():
            item = self._inventory.move(code, loc)
        if not item:
            raise NotFoundError("Barcode not found")
        return item

    def list_items(self, flt: InventoryFilter, page: PageRequest) -> dict:
        items, total = self._inventory.search(flt, page)
        return {"items": [i.to_dict() for i in items], "pagination": pagination_info(page, total)}

    def overview(self) -> dict:
        """READY counts per location and product label; every location and product is present."""
        products = {p.product_id: p for p in self._products.list_all()}
        labels = [p.label for p in products.values()]

        by_location: dict[str, dict[str, int]] = {loc.value: {k: 0 for k in labels} for loc in Location}
        for loc, product_id, count in self._inventory.ready_counts():
            product = products.get(product_id)
            if not product:
                continue
            bucket = by_location.setdefault(loc.value, {k: 0 for k in labels})
            bucket[product.label] = bucket.get(product.label, 0) + count

        totals = {k: 0 for k in labels}
        for bucket in by_location.values():
            for key, count in bucket.items():
                totals[key] = totals.get(key, 0) + count
        return {"byLocation": by_location, "all": totals}

    def set_stock(self, *, product_id: Any, location: Any, quantity: Any) -> StockSetResult:
        """Replace READY stock of a product at a location with exactly ``quantity`` units."""
        try:
            pid = int(product_id)
        except (TypeError, ValueError):
            raise ValidationError("productId is required")
        if pid <= 0:
            raise ValidationError("productId is required")
        loc = require_location(location)
        qty = max(0, int(require_number(quantity, "quantity") // 1))

        product = self._products.get_by_id(pid)
        if not product:
            raise NotFoundError("Product not found")

        stamp = int(now_utc().timestamp() * 1000)
        with self._tx():
            self._inventory.delete_ready(pid, loc)
            if qty:
                self._inventory.create_many(
                    [
                        NewInventoryItem(
                            barcode=f"{AUTO_BARCODE_PREFIX}-{product.code}-{stamp}-{idx}-{secrets.token_hex(3)}".upper(),
                            location=loc,
                            product_id=pid,
                        )
                        for idx in range(qty)
                    ]
                )
        return StockSetResult(product_id=pid, location=loc, quantity=qty)

    @staticmethod
    def parse_filter(args: Any) -> InventoryFilter:
        status_raw = (args.get("status") or "").upper()
        status: Optional[InventoryStatus] = None
        if status_raw:
            try:
                status = InventoryStatus(status_raw)
            except ValueError:
                raise ValidationError("status must be READY or SOLD")
        location = args.get("location") or None
        return InventoryFilter(
            location=require_location(location) if location else None,
            product_code=(args.get("productCode") or None),
            status=status,
            search=(args.get("search") or None),
        )
