"""Revenue and omset rules shared by metrics, the period report and the debt ledger."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable

from ..core.enums import DeliveryStatus, PaymentStatus
from ..orders.model import Order
from ..sales.model import Sale
from .model import FinanceEntry


def sale_revenue(sale: Sale) -> int:
    """actPayout, else actualReceived, else the sum of item prices."""
    return int(sale.act_payout or sale.actual_received or sale.items_total or 0)


def revenue_by_outlet(sales: Iterable[Sale]) -> list[dict]:
    totals: dict[str, int] = defaultdict(int)
    for sale in sales:
        totals[sale.outlet] += sale_revenue(sale)
    return [{"outlet": outlet, "amount": amount} for outlet, amount in sorted(totals.items())]


def shipping_overrun(order: Order) -> int:
    overrun = 0
    for d in order.deliveries:
        if d.status == DeliveryStatus.DELIVERED.value and d.ongkir_plan and d.ongkir_actual:
            overrun += max(0, d.ongkir_actual - d.ongkir_plan)
    return overrun


def order_omset(order: Order) -> int:
    """Amount an order actually brought in, by outlet kind."""
    outlet = (order.outlet or "").lower()
    if outlet == "free":
        return 0
    if outlet == "cafe":
        return int(order.act_payout or 0)
    if outlet == "whatsapp":
        goods = max(0, order.total_amount - order.ongkir_plan)
        return max(0, goods - shipping_overrun(order))
    if order.act_payout is not None:
        return int(order.act_payout)
    return int(order.total_amount or 0)


def total_omset_paid(orders: Iterable[Order]) -> int:
    """Omset of paid orders; NOT PAID ones are still outstanding."""
    total = 0
    for order in orders:
        if order.status == PaymentStatus.NOT_PAID:
            continue
        total += max(0, order_omset(order))
    return total


def summarize_entries(entries: Iterable[FinanceEntry]) -> dict[str, Any]:
    grouped: dict[str, dict[str, Any]] = {}
    for entry in entries:
        bucket = grouped.setdefault(entry.category.value, {"category": entry.category.value, "amount": 0, "data": []})
        bucket["amount"] += entry.amount
        if entry.data:
            bucket["data"].append(entry.data)
    by_category = list(grouped.values())
    return {"total": sum(b["amount"] for b in by_category), "byCategory": by_category}
