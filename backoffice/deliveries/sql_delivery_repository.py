from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import or_

from ..common.pagination import PageRequest
from ..core.enums import DeliveryStatus, Location
from ..database.extensions import db
from ..database.models import DeliveryItemRow, DeliveryRow, OrderRow, ProductRow
from .model import Delivery, DeliveryItem, NewDelivery, NewDeliveryItem


def to_delivery(row: DeliveryRow, products: Optional[dict[int, ProductRow]] = None) -> Delivery:
    products = products or {}
    order = row.order
    return Delivery(
        delivery_id=int(row.id),
        order_id=int(row.order_id),
        status=DeliveryStatus(row.status),
        delivery_date=row.delivery_date,
        ongkir_plan=int(row.ongkir_plan or 0),
        ongkir_actual=int(row.ongkir_actual or 0),
        created_at=row.created_at,
        items=tuple(
            DeliveryItem(
                item_id=int(i.id),
                product_id=int(i.product_id),
                barcode=i.barcode,
                price=int(i.price),
                product_code=products[i.product_id].code if i.product_id in products else None,
                product_name=products[i.product_id].name if i.product_id in products else None,
            )
            for i in row.items
        ),
        outlet=order.outlet if order else None,
        customer=order.customer if order else None,
        location=Location(order.location) if order else None,
    )


def _product_map(rows: Sequence[DeliveryRow]) -> dict[int, ProductRow]:
    ids = {i.product_id for r in rows for i in r.items}
    if not ids:
        return {}
    return {p.id: p for p in ProductRow.query.filter(ProductRow.id.in_(ids)).all()}


class SqlDeliveryRepository:
    def get(self, delivery_id: int) -> Optional[Delivery]:
        row = db.session.get(DeliveryRow, delivery_id)
        return to_delivery(row, _product_map([row])) if row else None

    def search(
        self, *, location: Optional[Location], search: Optional[str], page: PageRequest
    ) -> tuple[list[Delivery], int]:
        q = DeliveryRow.query.join(OrderRow, DeliveryRow.order_id == OrderRow.id)
        if location:
            q = q.filter(OrderRow.location == location.value)
        if search:
            q = q.filter(or_(OrderRow.customer.contains(search), OrderRow.outlet.contains(search)))
        total = q.count()
        rows = q.order_by(DeliveryRow.id.desc()).offset(page.offset).limit(page.limit).all()
        products = _product_map(rows)
        return [to_delivery(r, products) for r in rows], int(total)

    def create(self, delivery: NewDelivery, items: Sequence[NewDeliveryItem]) -> Delivery:
        row = DeliveryRow(
            order_id=delivery.order_id,
            status=delivery.status.value,
            delivery_date=delivery.delivery_date,
            ongkir_plan=delivery.ongkir_plan,
            ongkir_actual=delivery.ongkir_actual,
        )
        row.items = [DeliveryItemRow(product_id=i.product_id, barcode=i.barcode, price=i.price) for i in items]
        db.session.add(row)
        db.session.flush()
        db.session.refresh(row)
        return to_delivery(row, _product_map([row]))

    def delete(self, delivery_id: int) -> bool:
        row = db.session.get(DeliveryRow, delivery_id)
        if not row:
            return False
        db.session.delete(row)
        db.session.flush()
        db.session.expire_all()
        return True
