from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import or_

from ..common.pagination import PageRequest
from ..core.enums import Location, PaymentStatus
from ..database.extensions import db
from ..database.models import OrderItemRow, OrderRow
from .model import DeliveryRef, NewOrderItem, Order, OrderDraft, OrderFilter, OrderItem


def to_order(row: OrderRow) -> Order:
    return Order(
        order_id=int(row.id),
        outlet=row.outlet,
        customer=row.customer,
        status=PaymentStatus.normalize(row.status),
        order_date=row.order_date,
        location=Location(row.location),
        total_amount=int(row.total_amount or 0),
        delivery_date=row.delivery_date,
        discount=row.discount,
        ongkir_plan=int(row.ongkir_plan or 0),
        self_pickup=bool(row.self_pickup),
        act_payout=row.act_payout,
        note=row.note,
        created_at=row.created_at,
        items=tuple(
            OrderItem(
                item_id=int(i.id),
                product_id=int(i.product_id),
                quantity=int(i.quantity),
                price=int(i.price),
                product_code=i.product.code if i.product else None,
                product_name=i.product.name if i.product else None,
            )
            for i in row.items
        ),
        deliveries=tuple(
            DeliveryRef(
                delivery_id=int(d.id),
                status=d.status,
                ongkir_actual=int(d.ongkir_actual or 0),
                ongkir_plan=int(d.ongkir_plan or 0),
            )
            for d in row.deliveries
        ),
    )


def _apply_draft(row: OrderRow, draft: OrderDraft) -> None:
    row.outlet = draft.outlet
    row.customer = draft.customer
    row.status = draft.status.value
    row.order_date = draft.order_date
    row.delivery_date = draft.delivery_date
    row.location = draft.location.value
    row.discount = draft.discount
    row.ongkir_plan = draft.ongkir_plan
    row.self_pickup = draft.self_pickup
    row.total_amount = draft.total_amount
    row.act_payout = draft.act_payout
    row.note = draft.note


class SqlOrderRepository:
    def get(self, order_id: int) -> Optional[Order]:
        row = db.session.get(OrderRow, order_id)
        return to_order(row) if row else None

    def search(self, flt: OrderFilter, page: PageRequest) -> tuple[list[Order], int]:
        q = OrderRow.query
        if flt.start:
            q = q.filter(OrderRow.order_date >= flt.start)
        if flt.end:
            q = q.filter(OrderRow.order_date <= flt.end)
        if flt.outlet:
            q = q.filter(OrderRow.outlet == flt.outlet)
        if flt.location:
            q = q.filter(OrderRow.location == flt.location.value)
        total = q.count()
        rows = q.order_by(OrderRow.id.desc()).offset(page.offset).limit(page.limit).all()
        return [to_order(r) for r in rows], int(total)

    def pending(
        self, *, location: Optional[Location], search: Optional[str], page: PageRequest
    ) -> tuple[list[Order], int]:
        q = OrderRow.query.filter(~OrderRow.deliveries.any())
        if location:
            q = q.filter(OrderRow.location == location.value)
        if search:
            q = q.filter(or_(OrderRow.customer.contains(search), OrderRow.outlet.contains(search)))
        total = q.count()
        rows = (
            q.order_by(
                OrderRow.delivery_date.is_(None).asc(),
                OrderRow.delivery_date.asc(),
                OrderRow.order_date.asc(),
                OrderRow.id.asc(),
            )
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        return [to_order(r) for r in rows], int(total)

    def list_between(self, start: datetime, end: datetime) -> Sequence[Order]:
        rows = (
            OrderRow.query.filter(OrderRow.order_date >= start, OrderRow.order_date <= end)
            .order_by(OrderRow.order_date.asc(), OrderRow.id.asc())
            .all()
        )
        return [to_order(r) for r in rows]

    def create(self, draft: OrderDraft, items: Sequence[NewOrderItem]) -> Order:
        row = OrderRow()
        _apply_draft(row, draft)
        row.items = [OrderItemRow(product_id=i.product_id, quantity=i.quantity, price=i.price) for i in items]
        db.session.add(row)
        db.session.flush()
        db.session.refresh(row)
        return to_order(row)

    def replace(self, order_id: int, draft: OrderDraft, items: Sequence[NewOrderItem]) -> Order:
        row = db.session.get(OrderRow, order_id)
        _apply_draft(row, draft)
        row.items = [OrderItemRow(product_id=i.product_id, quantity=i.quantity, price=i.price) for i in items]
        db.session.flush()
        db.session.refresh(row)
        return to_order(row)

    def delete(self, order_id: int) -> bool:
        row = db.session.get(OrderRow, order_id)
        if not row:
            return False
        db.session.delete(row)
        db.session.flush()
        return True

    def set_item_quantity(self, item_id: int, quantity: int) -> None:
        row = db.session.get(OrderItemRow, item_id)
        row.quantity = quantity
        db.session.flush()

    def delete_item(self, item_id: int) -> None:
        row = db.session.get(OrderItemRow, item_id)
        if row.order is not None and row in row.order.items:
            row.order.items.remove(row)
        else:
            db.session.delete(row)
        db.session.flush()

    def set_total(self, order_id: int, total_amount: int) -> None:
        row = db.session.get(OrderRow, order_id)
        row.total_amount = total_amount
        db.session.flush()
