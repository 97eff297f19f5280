from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Product:
    """Retail product; ``code`` is the master code printed inside stock barcodes."""

    product_id: int
    code: str
    name: str
    price: int
    hpp_pct: float
    hpp_value: int
    created_at: Optional[datetime] = None

    @property
    def label(self) -> str:
        return f"{self.name} ({self.code})"

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "code": self.code,
            "name": self.name,
            "price": self.price,
            "hppPct": self.hpp_pct,
            "hppValue": self.hpp_value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ProductB2B:
    product_id: int
    code: str
    name: str
    price: int
    hpp_pct: Optional[float] = None
    hpp_value: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "code": self.code,
            "name": self.name,
            "price": self.price,
            "hppPct": self.hpp_pct,
            "hppValue": self.hpp_value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
