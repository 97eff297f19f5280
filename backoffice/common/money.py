from __future__ import annotations

import math
from typing import Iterable


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def apply_discount(subtotal: int, discount_pct: float | None) -> int:
    """Return ``subtotal`` reduced by ``discount_pct`` percent (0..100)."""
    pct = float(discount_pct or 0)
    pct = min(max(pct, 0.0), 100.0)
    return round_half_up(subtotal * (1 - pct / 100))


def hpp_value(price: int, hpp_pct: float | None) -> int:
    return round_half_up(int(price or 0) * float(hpp_pct or 0))


def total(values: Iterable[int | None]) -> int:
    return sum(int(v or 0) for v in values)
