from __future__ import annotations

from typing import Optional

from ..b2b.model import B2BOrderFilter
from ..b2b.repository import B2BOrderRepository
from ..common.datetime_utils import iso
from ..common.money import apply_discount, round_half_up
from ..core.enums import InventoryStatus, Location
from ..inventory.repository import InventoryRepository
from ..products.repository import ProductRepository
from ..sales.model import CAFE_SOLD_STATUS, Sale, SaleFilter
from ..sales.repository import SaleRepository

DISCOUNT_OUTLETS = ("whatsapp", "cafe", "wholesale")


def _pct(part: float, whole: float) -> Optional[float]:
    if whole <= 0:
        return None
    return round_half_up(part / whole * 1000) / 10


def sale_breakdown(sale: Sale) -> dict:
    """Subtotal, discount and potongan (the cut taken between expected and received)."""
    outlet = sale.outlet.lower()
    is_cafe = outlet == "cafe"
    items = [i for i in sale.items if (i.status or "").lower() == CAFE_SOLD_STATUS.lower()] if is_cafe else sale.items
    subtotal = sum(i.price for i in items)
    discount_pct = float(sale.discount or 0) if outlet in DISCOUNT_OUTLETS else 0.0
    discounted = apply_discount(subtotal, discount_pct)

    if is_cafe:
        expected = discounted
        actual: Optional[int] = discounted
        potongan: Optional[int] = subtotal - discounted
        potongan_pct = _pct(potongan, subtotal)
    else:
        expected = sale.est_payout if sale.est_payout is not None else discounted
        actual = sale.act_payout
        potongan = expected - actual if actual is not None else None
        potongan_pct = _pct(potongan, expected) if potongan is not None else None

    return {
        "id": sale.sale_id,
        "outlet": sale.outlet,
        "location": sale.location.value,
        "orderDate": iso(sale.order_date),
        "subtotal": subtotal,
        "discountPct": discount_pct,
        "total": expected,
        "actualReceived": actual,
        "potongan": potongan,
        "potonganPct": potongan_pct,
        "itemsCount": len(sale.items),
    }


class ReportService:
    """Read-only aggregates over sales, stock and B2B orders."""

    def __init__(
        self,
        sales: SaleRepository,
        inventory: InventoryRepository,
        products: ProductRepository,
        b2b_orders: B2BOrderRepository,
    ):
        self._sales = sales
        self._inventory = inventory
        self._products = products
        self._b2b_orders = b2b_orders

    def sales_report(self, flt: SaleFilter) -> dict:
        rows = [sale_breakdown(s) for s in self._sales.list_matching(flt)]
        by_outlet: dict[str, dict] = {}
        for row in rows:
            bucket = by_outlet.setdefault(row["outlet"], {"count": 0, "actual": 0, "original": 0, "potongan": 0})
            bucket["count"] += 1
            bucket["actual"] += row["actualReceived"] or 0
            bucket["original"] += row["subtotal"]
            bucket["potongan"] += row["potongan"] or 0

        total_original = sum(b["original"] for b in by_outlet.values())
        total_potongan = sum(b["potongan"] for b in by_outlet.values())
        return {
            "byOutlet": {
                outlet: {"count": b["count"], "actual": b["actual"], "potonganPct": _pct(b["potongan"], b["original"])}
                for outlet, b in by_outlet.items()
            },
            "totalActual": sum(b["actual"] for b in by_outlet.values()),
            "avgPotonganPct": _pct(total_potongan, total_original),
            "sales": rows,
        }

    def inventory_report(self, *, location: Optional[Location] = None, product_code: Optional[str] = None) -> dict:
        products = {p.product_id: p for p in self._products.list_all()}
        if product_code:
            products = {pid: p for pid, p in products.items() if p.code == product_code.upper()}

        counts: dict[tuple[Location, int], dict[str, int]] = {}
        for loc, pid, status, n in self._inventory.status_counts():
            if pid not in products or (location and loc != location):
                continue
            bucket = counts.setdefault((loc, pid), {InventoryStatus.READY.value: 0, InventoryStatus.SOLD.value: 0})
            bucket[status.value] += n

        locations = [location] if location else list(Location)
        by_location = {
            loc.value: {
                p.label: counts.get((loc, pid), {}).get(InventoryStatus.READY.value, 0) for pid, p in products.items()
            }
            for loc in locations
        }
        overall = {p.label: sum(by_location[loc][p.label] for loc in by_location) for p in products.values()}
        rows = [
            {
                "productId": pid,
                "code": products[pid].code,
                "name": products[pid].name,
                "location": loc.value,
                "ready": bucket[InventoryStatus.READY.value],
                "sold": bucket[InventoryStatus.SOLD.value],
            }
            for (loc, pid), bucket in sorted(counts.items(), key=lambda kv: (kv[0][0].value, products[kv[0][1]].code))
        ]
        return {"byLocation": by_location, "all": overall, "rows": rows}

    def b2b_report(self, flt: B2BOrderFilter) -> dict:
        orders = self._b2b_orders.list_matching(flt)
        by_outlet: dict[str, dict] = {}
        for order in orders:
            bucket = by_outlet.setdefault(order.outlet.value, {"count": 0, "total": 0})
            bucket["count"] += 1
            bucket["total"] += order.total_amount
        return {
            "rows": [o.to_dict() for o in orders],
            "totalOrders": len(orders),
            "totalAmount": sum(o.total_amount for o in orders),
            "byOutlet": by_outlet,
        }

    def menu_items_report(self, flt: SaleFilter) -> dict:
        sales = self._sales.list_matching(flt)
        products = self._products.get_many({i.product_id for s in sales for i in s.items})
        grouped: dict[int, dict] = {}
        for sale in sales:
            for item in sale.items:
                product = products.get(item.product_id)
                if product is None:
                    continue
                entry = grouped.setdefault(
                    item.product_id,
                    {
                        "productCode": product.code,
                        "productName": product.name,
                        "productPrice": product.price,
                        "hppPct": product.hpp_pct,
                        "totalQuantity": 0,
                        "totalRevenue": 0,
                        "totalHppValue": 0,
                        "outlets": [],
                        "locations": [],
                    },
                )
                entry["totalQuantity"] += 1
                entry["totalRevenue"] += item.price
                entry["totalHppValue"] += round_half_up(item.price * float(product.hpp_pct or 0))
                if sale.outlet not in entry["outlets"]:
                    entry["outlets"].append(sale.outlet)
                if sale.location.value not in entry["locations"]:
                    entry["locations"].append(sale.location.value)

        menu_items = []
        for entry in grouped.values():
            entry["averagePrice"] = round_half_up(entry["totalRevenue"] / entry["totalQuantity"])
            entry["totalProfit"] = entry["totalRevenue"] - entry["totalHppValue"]
            menu_items.append(entry)
        menu_items.sort(key=lambda e: e["totalQuantity"], reverse=True)
        return {
            "menuItems": menu_items,
            "totals": {
                "totalItems": sum(e["totalQuantity"] for e in menu_items),
                "totalRevenue": sum(e["totalRevenue"] for e in menu_items),
                "totalHppValue": sum(e["totalHppValue"] for e in menu_items),
                "totalProfit": sum(e["totalProfit"] for e in menu_items),
                "uniqueProducts": len(menu_items),
            },
        }
