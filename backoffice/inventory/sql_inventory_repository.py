from __future__ import annotations

from typing import Iterable, Optional, Sequence

from sqlalchemy import func

from ..common.pagination import PageRequest
from ..core.enums import InventoryStatus, Location
from ..database.extensions import db
from ..database.models import InventoryRow, ProductRow
from ..products.sql_product_repository import to_product
from .model import InventoryFilter, InventoryItem, NewInventoryItem


def to_item(row: InventoryRow) -> InventoryItem:
    return InventoryItem(
        item_id=int(row.id),
        barcode=row.barcode,
        location=Location(row.location),
        product_id=int(row.product_id),
        status=InventoryStatus(row.status),
        created_at=row.created_at,
        product=to_product(row.product) if row.product else None,
    )


class SqlInventoryRepository:
    def get_by_barcode(self, barcode: str) -> Optional[InventoryItem]:
        row = InventoryRow.query.filter_by(barcode=barcode).first()
        return to_item(row) if row else None

    def get_many(self, barcodes: Iterable[str]) -> dict[str, InventoryItem]:
        codes = list(set(barcodes))
        if not codes:
            return {}
        rows = InventoryRow.query.filter(InventoryRow.barcode.in_(codes)).all()
        return {r.barcode: to_item(r) for r in rows}

    def create_many(self, items: Sequence[NewInventoryItem]) -> list[InventoryItem]:
        rows = [
            InventoryRow(barcode=i.barcode, location=i.location.value, product_id=i.product_id, status=i.status.value)
            for i in items
        ]
        db.session.add_all(rows)
        db.session.flush()
        return [to_item(r) for r in rows]

    def delete(self, barcode: str) -> bool:
        return InventoryRow.query.filter_by(barcode=barcode).delete(synchronize_session=False) > 0

    def set_status(self, barcodes: Iterable[str], status: InventoryStatus) -> int:
        codes = list(set(barcodes))
        if not codes:
            return 0
        updated = InventoryRow.query.filter(InventoryRow.barcode.in_(codes)).update(
            {InventoryRow.status: status.value}, synchronize_session=False
        )
        db.session.expire_all()
        return updated

    def move(self, barcode: str, location: Location) -> Optional[InventoryItem]:
        row = InventoryRow.query.filter_by(barcode=barcode).first()
        if not row:
            return None
        row.location = location.value
        db.session.flush()
        return to_item(row)

    def search(self, flt: InventoryFilter, page: PageRequest) -> tuple[list[InventoryItem], int]:
        q = InventoryRow.query
        if flt.location:
            q = q.filter(InventoryRow.location == flt.location.value)
        if flt.status:
            q = q.filter(InventoryRow.status == flt.status.value)
        if flt.search:
            q = q.filter(InventoryRow.barcode.contains(flt.search))
        if flt.product_code:
            q = q.join(ProductRow, ProductRow.id == InventoryRow.product_id).filter(ProductRow.code == flt.product_code)
        total = q.count()
        rows = (
            q.order_by(InventoryRow.created_at.desc(), InventoryRow.id.desc())
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        return [to_item(r) for r in rows], int(total)

    def ready_counts(self) -> list[tuple[Location, int, int]]:
        rows = (
            db.session.query(InventoryRow.location, InventoryRow.product_id, func.count(InventoryRow.id))
            .filter(InventoryRow.status == InventoryStatus.READY.value)
            .group_by(InventoryRow.location, InventoryRow.product_id)
            .all()
        )
        return [(Location(loc), int(pid), int(n)) for loc, pid, n in rows]

    def status_counts(self) -> list[tuple[Location, int, InventoryStatus, int]]:
        rows = (
            db.session.query(InventoryRow.location, InventoryRow.product_id, InventoryRow.status, func.count(InventoryRow.id))
            .group_by(InventoryRow.location, InventoryRow.product_id, InventoryRow.status)
            .all()
        )
        return [(Location(loc), int(pid), InventoryStatus(st), int(n)) for loc, pid, st, n in rows]

    def count_ready(self, product_id: int, location: Location) -> int:
        return InventoryRow.query.filter_by(
            product_id=product_id, location=location.value, status=InventoryStatus.READY.value
        ).count()

    def oldest_ready(self, product_id: int, location: Location, limit: int) -> list[InventoryItem]:
        rows = (
            InventoryRow.query.filter_by(product_id=product_id, location=location.value, status=InventoryStatus.READY.value)
            .order_by(InventoryRow.created_at.asc(), InventoryRow.id.asc())
            .limit(limit)
            .all()
        )
        return [to_item(r) for r in rows]

    def delete_ready(self, product_id: int, location: Location) -> int:
        return InventoryRow.query.filter_by(
            product_id=product_id, location=location.value, status=InventoryStatus.READY.value
        ).delete(synchronize_session=False)
