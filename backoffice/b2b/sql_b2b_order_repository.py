from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import or_

from ..common.pagination import PageRequest
from ..core.enums import B2BItemSource, B2BOutlet, Location
from ..database.extensions import db
from ..database.models import OrderB2BItemRow, OrderB2BRow, ProductB2BRow, ProductRow
from .model import B2BOrder, B2BOrderDraft, B2BOrderFilter, B2BOrderItem, NewB2BItem


def _names(rows: Sequence[OrderB2BRow]) -> tuple[dict[int, ProductB2BRow], dict[int, ProductRow]]:
    b2b_ids = {i.product_b2b_id for r in rows for i in r.items if i.product_b2b_id}
    retail_ids = {i.product_id for r in rows for i in r.items if i.product_id}
    b2b = {p.id: p for p in ProductB2BRow.query.filter(ProductB2BRow.id.in_(b2b_ids)).all()} if b2b_ids else {}
    retail = {p.id: p for p in ProductRow.query.filter(ProductRow.id.in_(retail_ids)).all()} if retail_ids else {}
    return b2b, retail


def _to_item(row: OrderB2BItemRow, b2b: dict, retail: dict) -> B2BOrderItem:
    source = B2BItemSource(row.source)
    product = b2b.get(row.product_b2b_id) if source == B2BItemSource.B2B else retail.get(row.product_id)
    return B2BOrderItem(
        item_id=int(row.id),
        source=source,
        quantity=int(row.quantity),
        price=int(row.price),
        product_b2b_id=row.product_b2b_id,
        product_id=row.product_id,
        barcodes=tuple(row.barcodes or ()),
        product_code=product.code if product else None,
        product_name=product.name if product else None,
    )


def to_b2b_order(row: OrderB2BRow, b2b: dict, retail: dict) -> B2BOrder:
    return B2BOrder(
        order_id=int(row.id),
        outlet=B2BOutlet(row.outlet),
        order_date=row.order_date,
        location=Location(row.location),
        total_amount=int(row.total_amount or 0),
        customer=row.customer,
        discount=row.discount,
        status=row.status,
        notes=row.notes,
        created_at=row.created_at,
        items=tuple(_to_item(i, b2b, retail) for i in row.items),
    )


def _convert(rows: Sequence[OrderB2BRow]) -> list[B2BOrder]:
    b2b, retail = _names(rows)
    return [to_b2b_order(r, b2b, retail) for r in rows]


def _apply(row: OrderB2BRow, draft: B2BOrderDraft, items: Sequence[NewB2BItem]) -> None:
    row.outlet = draft.outlet.value
    row.customer = draft.customer
    row.order_date = draft.order_date
    row.location = draft.location.value
    row.discount = draft.discount
    row.status = draft.status
    row.notes = draft.notes
    row.total_amount = draft.total_amount
    row.items = [
        OrderB2BItemRow(
            source=i.source.value,
            product_b2b_id=i.product_b2b_id,
            product_id=i.product_id,
            quantity=i.quantity,
            price=i.price,
            barcodes=list(i.barcodes) or None,
        )
        for i in items
    ]


class SqlB2BOrderRepository:
    def get(self, order_id: int) -> Optional[B2BOrder]:
        row = db.session.get(OrderB2BRow, order_id)
        return _convert([row])[0] if row else None

    def _filtered(self, flt: B2BOrderFilter):
        q = OrderB2BRow.query
        if flt.start:
            q = q.filter(OrderB2BRow.order_date >= flt.start)
        if flt.end:
            q = q.filter(OrderB2BRow.order_date <= flt.end)
        if flt.outlet:
            q = q.filter(OrderB2BRow.outlet == flt.outlet.value)
        if flt.location:
            q = q.filter(OrderB2BRow.location == flt.location.value)
        if flt.search:
            conditions = [OrderB2BRow.customer.contains(flt.search), OrderB2BRow.outlet.contains(flt.search)]
            if flt.search.isdigit():
                conditions.append(OrderB2BRow.id == int(flt.search))
            q = q.filter(or_(*conditions))
        return q

    def search(self, flt: B2BOrderFilter, page: PageRequest) -> tuple[list[B2BOrder], int]:
        q = self._filtered(flt)
        total = q.count()
        rows = q.order_by(OrderB2BRow.id.desc()).offset(page.offset).limit(page.limit).all()
        return _convert(rows), int(total)

    def list_matching(self, flt: B2BOrderFilter) -> Sequence[B2BOrder]:
        rows = self._filtered(flt).order_by(OrderB2BRow.order_date.desc(), OrderB2BRow.id.desc()).all()
        return _convert(rows)

    def create(self, draft: B2BOrderDraft, items: Sequence[NewB2BItem]) -> B2BOrder:
        row = OrderB2BRow()
        _apply(row, draft, items)
        db.session.add(row)
        db.session.flush()
        db.session.refresh(row)
        return _convert([row])[0]

    def replace(self, order_id: int, draft: B2BOrderDraft, items: Sequence[NewB2BItem]) -> B2BOrder:
        row = db.session.get(OrderB2BRow, order_id)
        _apply(row, draft, items)
        db.session.flush()
        db.session.refresh(row)
        return _convert([row])[0]

    def delete(self, order_id: int) -> bool:
        row = db.session.get(OrderB2BRow, order_id)
        if not row:
            return False
        db.session.delete(row)
        db.session.flush()
        return True
