from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import func

from ..common.pagination import PageRequest
from ..core.enums import Location
from ..database.extensions import db
from ..database.models import SaleItemRow, SaleRow
from .model import NewSale, NewSaleItem, Sale, SaleFilter, SaleItem

_COLUMNS = {
    "outlet": "outlet",
    "customer": "customer",
    "status": "status",
    "order_date": "order_date",
    "ship_date": "ship_date",
    "location": "location",
    "discount": "discount",
    "est_payout": "est_payout",
    "act_payout": "act_payout",
    "actual_received": "actual_received",
}


def to_item(row: SaleItemRow) -> SaleItem:
    return SaleItem(
        item_id=int(row.id),
        sale_id=int(row.sale_id),
        product_id=int(row.product_id),
        barcode=row.barcode,
        price=int(row.price or 0),
        status=row.status,
    )


def to_sale(row: SaleRow) -> Sale:
    return Sale(
        sale_id=int(row.id),
        outlet=row.outlet,
        location=Location(row.location),
        order_date=row.order_date,
        customer=row.customer,
        status=row.status,
        ship_date=row.ship_date,
        discount=row.discount,
        est_payout=row.est_payout,
        act_payout=row.act_payout,
        actual_received=row.actual_received,
        created_at=row.created_at,
        items=tuple(to_item(i) for i in row.items),
    )


class SqlSaleRepository:
    def get(self, sale_id: int) -> Optional[Sale]:
        row = db.session.get(SaleRow, sale_id)
        return to_sale(row) if row else None

    def _filtered(self, flt: SaleFilter):
        q = SaleRow.query
        if flt.start:
            q = q.filter(SaleRow.order_date >= flt.start)
        if flt.end:
            q = q.filter(SaleRow.order_date <= flt.end)
        if flt.outlet:
            q = q.filter(func.lower(SaleRow.outlet) == flt.outlet.lower())
        if flt.location:
            q = q.filter(SaleRow.location == flt.location.value)
        return q

    def search(self, flt: SaleFilter, page: PageRequest) -> tuple[list[Sale], int]:
        q = self._filtered(flt)
        total = q.count()
        rows = q.order_by(SaleRow.created_at.desc(), SaleRow.id.desc()).offset(page.offset).limit(page.limit).all()
        return [to_sale(r) for r in rows], int(total)

    def list_matching(self, flt: SaleFilter) -> Sequence[Sale]:
        rows = self._filtered(flt).order_by(SaleRow.order_date.desc(), SaleRow.id.desc()).all()
        return [to_sale(r) for r in rows]

    def list_between(self, start: datetime, end: datetime) -> Sequence[Sale]:
        rows = (
            SaleRow.query.filter(SaleRow.order_date >= start, SaleRow.order_date <= end)
            .order_by(SaleRow.order_date.asc())
            .all()
        )
        return [to_sale(r) for r in rows]

    def create(self, sale: NewSale) -> Sale:
        row = SaleRow(
            outlet=sale.outlet,
            customer=sale.customer,
            status=sale.status,
            order_date=sale.order_date,
            ship_date=sale.ship_date,
            location=sale.location.value,
            discount=sale.discount,
            est_payout=sale.est_payout,
            act_payout=sale.act_payout,
        )
        db.session.add(row)
        db.session.flush()
        return to_sale(row)

    def update(self, sale_id: int, fields: dict[str, Any]) -> Optional[Sale]:
        row = db.session.get(SaleRow, sale_id)
        if not row:
            return None
        for key, value in fields.items():
            if isinstance(value, Location):
                value = value.value
            setattr(row, _COLUMNS[key], value)
        db.session.flush()
        return to_sale(row)

    def delete(self, sale_id: int) -> bool:
        row = db.session.get(SaleRow, sale_id)
        if not row:
            return False
        db.session.delete(row)
        db.session.flush()
        return True

    def add_items(self, sale_id: int, items: Sequence[NewSaleItem]) -> list[SaleItem]:
        rows = [
            SaleItemRow(sale_id=sale_id, product_id=i.product_id, barcode=i.barcode, price=i.price, status=i.status)
            for i in items
        ]
        db.session.add_all(rows)
        db.session.flush()
        db.session.expire_all()
        return [to_item(r) for r in rows]

    def get_item(self, item_id: int) -> Optional[SaleItem]:
        row = db.session.get(SaleItemRow, item_id)
        return to_item(row) if row else None

    def update_item(self, item_id: int, *, status: Optional[str], price: Optional[int]) -> Optional[SaleItem]:
        row = db.session.get(SaleItemRow, item_id)
        if not row:
            return None
        if status is not None:
            row.status = status
        if price is not None:
            row.price = price
        db.session.flush()
        return to_item(row)

    def delete_item(self, item_id: int) -> bool:
        row = db.session.get(SaleItemRow, item_id)
        if not row:
            return False
        db.session.delete(row)
        db.session.flush()
        db.session.expire_all()
        return True

    def reprice_product_items(self, product_id: int, price: int) -> list[int]:
        SaleItemRow.query.filter_by(product_id=product_id).update({SaleItemRow.price: price}, synchronize_session=False)
        db.session.expire_all()
        rows = db.session.query(SaleItemRow.sale_id).filter_by(product_id=product_id).distinct().all()
        return [int(r[0]) for r in rows]

    def recompute_est_payout(self, sale_id: int) -> int:
        total = db.session.query(func.coalesce(func.sum(SaleItemRow.price), 0)).filter_by(sale_id=sale_id).scalar()
        row = db.session.get(SaleRow, sale_id)
        if row:
            row.est_payout = int(total or 0)
            db.session.flush()
        return int(total or 0)
