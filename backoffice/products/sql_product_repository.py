from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.extensions import db
from ..database.models import (
    InventoryRow,
    OrderB2BItemRow,
    OrderItemRow,
    ProductB2BRow,
    ProductRow,
    SaleItemRow,
)
from .model import Product, ProductB2B


def to_product(row: ProductRow) -> Product:
    return Product(
        product_id=int(row.id),
        code=row.code,
        name=row.name,
        price=int(row.price or 0),
        hpp_pct=float(row.hpp_pct or 0),
        hpp_value=int(row.hpp_value or 0),
        created_at=row.created_at,
    )


def to_product_b2b(row: ProductB2BRow) -> ProductB2B:
    return ProductB2B(
        product_id=int(row.id),
        code=row.code,
        name=row.name,
        price=int(row.price or 0),
        hpp_pct=row.hpp_pct,
        hpp_value=row.hpp_value,
        created_at=row.created_at,
    )


class SqlProductRepository:
    def get_by_id(self, product_id: int) -> Optional[Product]:
        row = db.session.get(ProductRow, product_id)
        return to_product(row) if row else None

    def get_by_code(self, code: str) -> Optional[Product]:
        row = ProductRow.query.filter_by(code=code).first()
        return to_product(row) if row else None

    def get_many(self, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = list({int(i) for i in product_ids})
        if not ids:
            return {}
        rows = ProductRow.query.filter(ProductRow.id.in_(ids)).all()
        return {int(r.id): to_product(r) for r in rows}

    def list_all(self) -> Sequence[Product]:
        return [to_product(r) for r in ProductRow.query.order_by(ProductRow.created_at.desc(), ProductRow.id.desc())]

    def create(self, *, code: str, name: str, price: int, hpp_pct: float, hpp_value: int) -> Product:
        row = ProductRow(code=code, name=name, price=price, hpp_pct=hpp_pct, hpp_value=hpp_value)
        db.session.add(row)
        db.session.flush()
        return to_product(row)

    def update(self, product_id: int, *, name: str, price: int, hpp_pct: float, hpp_value: int) -> Product:
        row = db.session.get(ProductRow, product_id)
        row.name = name
        row.price = price
        row.hpp_pct = hpp_pct
        row.hpp_value = hpp_value
        db.session.flush()
        return to_product(row)

    def delete(self, product_id: int) -> bool:
        row = db.session.get(ProductRow, product_id)
        if not row:
            return False
        db.session.delete(row)
        return True

    def is_referenced(self, product_id: int) -> bool:
        for model in (InventoryRow, SaleItemRow, OrderItemRow, OrderB2BItemRow):
            if db.session.query(model.id).filter(model.product_id == product_id).first():
                return True
        return False


class SqlProductB2BRepository:
    def get_by_id(self, product_id: int) -> Optional[ProductB2B]:
        row = db.session.get(ProductB2BRow, product_id)
        return to_product_b2b(row) if row else None

    def get_by_code(self, code: str) -> Optional[ProductB2B]:
        row = ProductB2BRow.query.filter_by(code=code).first()
        return to_product_b2b(row) if row else None

    def get_many(self, product_ids: Iterable[int]) -> dict[int, ProductB2B]:
        ids = list({int(i) for i in product_ids})
        if not ids:
            return {}
        rows = ProductB2BRow.query.filter(ProductB2BRow.id.in_(ids)).all()
        return {int(r.id): to_product_b2b(r) for r in rows}

    def list_all(self) -> Sequence[ProductB2B]:
        return [to_product_b2b(r) for r in ProductB2BRow.query.order_by(ProductB2BRow.name.asc())]

    def create(
        self, *, code: str, name: str, price: int, hpp_pct: Optional[float], hpp_value: Optional[int]
    ) -> ProductB2B:
        row = ProductB2BRow(code=code, name=name, price=price, hpp_pct=hpp_pct, hpp_value=hpp_value)
        db.session.add(row)
        db.session.flush()
        return to_product_b2b(row)

    def update(
        self, product_id: int, *, name: str, price: int, hpp_pct: Optional[float], hpp_value: Optional[int]
    ) -> ProductB2B:
        row = db.session.get(ProductB2BRow, product_id)
        row.name = name
        row.price = price
        row.hpp_pct = hpp_pct
        row.hpp_value = hpp_value
        db.session.flush()
        return to_product_b2b(row)

    def delete(self, product_id: int) -> bool:
        row = db.session.get(ProductB2BRow, product_id)
        if not row:
            return False
        db.session.delete(row)
        return True

    def is_referenced(self, product_id: int) -> bool:
        return db.session.query(OrderB2BItemRow.id).filter(OrderB2BItemRow.product_b2b_id == product_id).first() is not None
