from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization and display."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    SALES = "Sales"
    BANDUNG = "Bandung"
    JAKARTA = "Jakarta"
    BAKER = "Baker"
    BDG_SALES = "BDGSales"


class Location(str, Enum):
    """Stock locations."""

    BANDUNG = "Bandung"
    JAKARTA = "Jakarta"


class InventoryStatus(str, Enum):
    READY = "READY"
    SOLD = "SOLD"


class BarcodeSize(str, Enum):
    LARGE = "LARGE"
    REGULAR = "REGULAR"
    PCS = "PCS"


class PaymentStatus(str, Enum):
    """Payment state of a delivery order."""

    PAID = "PAID"
    NOT_PAID = "NOT PAID"

    @classmethod
    def normalize(cls, value: str | None) -> "PaymentStatus":
        if value is None:
            return cls.PAID
        squashed = "".join(str(value).split()).replace("_", "").upper()
        if squashed == "NOTPAID":
            return cls.NOT_PAID
        return cls.PAID


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"


class B2BOutlet(str, Enum):
    WHOLESALE = "Wholesale"
    CAFE = "Cafe"


class B2BItemSource(str, Enum):
    B2B = "B2B"
    RETAIL = "Retail"


class OvertimeStatus(str, Enum):
    """Approval flow state of an overtime request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class FinanceCategory(str, Enum):
    """Expense categories for finance plan/actual entries."""

    BAHAN = "BAHAN"
    PAYROLL = "PAYROLL"
    BUILDING = "BUILDING"
    OPERASIONAL = "OPERASIONAL"
    TRANSPORT = "TRANSPORT"
    PERLENGKAPAN = "PERLENGKAPAN"
    MARKETING = "MARKETING"
