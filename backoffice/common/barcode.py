from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import BarcodeSize
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ParsedBarcode:
    normalized: str
    menu: str
    size: BarcodeSize
    master_code: str


_SIZE_SUFFIXES = {
    "L": BarcodeSize.LARGE,
    "R": BarcodeSize.REGULAR,
}


def parse_barcode(raw: str) -> ParsedBarcode:
    """Parse a printed stock barcode.

    Formats:
    - ``212-HOK-L`` -> LARGE, master code ``HOK-L``
    - ``212-HOK-R`` -> REGULAR, master code ``HOK-R``
    - ``343-BRW``   -> PCS, master code ``BRW``
    """
    normalized = (raw or "").strip().upper()
    parts = normalized.split("-")

    if len(parts) == 3 and all(parts):
        _, code, suffix = parts
        size = _SIZE_SUFFIXES.get(suffix)
        if size is None:
            raise ValidationError("Invalid barcode size suffix (expected L or R)")
        return ParsedBarcode(normalized=normalized, menu=code, size=size, master_code=f"{code}-{suffix}")

    if len(parts) == 2 and all(parts):
        return ParsedBarcode(normalized=normalized, menu=parts[1], size=BarcodeSize.PCS, master_code=parts[1])

    raise ValidationError("Invalid barcode format")
