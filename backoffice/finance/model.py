from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import iso
from ..core.enums import FinanceCategory


@dataclass(frozen=True)
class FinanceWeek:
    week_id: int
    name: str
    month: int
    year: int
    start_date: datetime
    end_date: datetime
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.week_id,
            "name": self.name,
            "month": self.month,
            "year": self.year,
            "startDate": iso(self.start_date),
            "endDate": iso(self.end_date),
            "createdAt": iso(self.created_at),
        }


@dataclass(frozen=True)
class FinanceEntry:
    entry_id: int
    category: FinanceCategory
    amount: int
    data: Any = None

    def to_dict(self) -> dict:
        return {"id": self.entry_id, "category": self.category.value, "amount": self.amount, "data": self.data}


@dataclass(frozen=True)
class DebtPayment:
    payment_id: int
    period_id: int
    term: int
    amount: int
    paid_at: Optional[datetime] = None
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "periodId": self.period_id,
            "term": self.term,
            "amount": self.amount,
            "paidAt": iso(self.paid_at),
            "note": self.note,
        }


@dataclass(frozen=True)
class FinancePeriod:
    """A budgeting window: a week-linked plan period or a monthly actual period."""

    period_id: int
    name: str
    month: int
    year: int
    start_date: datetime
    end_date: datetime
    week: Optional[FinanceWeek] = None
    plan_entries: tuple[FinanceEntry, ...] = field(default_factory=tuple)
    actual_entries: tuple[FinanceEntry, ...] = field(default_factory=tuple)
    payments: tuple[DebtPayment, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def week_id(self) -> Optional[int]:
        return self.week.week_id if self.week else None

    @property
    def total_plan(self) -> int:
        return sum(e.amount for e in self.plan_entries)

    @property
    def total_actual(self) -> int:
        return sum(e.amount for e in self.actual_entries)

    @property
    def total_paid(self) -> int:
        return sum(p.amount for p in self.payments)

    @property
    def display_name(self) -> str:
        return self.name or (self.week.name if self.week else "") or f"Periode {self.period_id}"

    def to_dict(self) -> dict:
        return {
            "id": self.period_id,
            "name": self.display_name,
            "month": self.month,
            "year": self.year,
            "startDate": iso(self.start_date),
            "endDate": iso(self.end_date),
            "weekId": self.week_id,
            "week": self.week.to_dict() if self.week else None,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def to_summary(self) -> dict:
        data = self.to_dict()
        data.update(
            {
                "totalPlan": self.total_plan,
                "totalActual": self.total_actual,
                "planEntryCount": len(self.plan_entries),
                "actualEntryCount": len(self.actual_entries),
            }
        )
        return data


@dataclass(frozen=True)
class NewEntry:
    category: FinanceCategory
    amount: int
    data: Any = None


@dataclass(frozen=True)
class PeriodDraft:
    name: str
    month: int
    year: int
    start_date: datetime
    end_date: datetime
    week_id: Optional[int] = None
