from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import FinanceCategory
from ..database.extensions import db
from ..database.models import (
    DebtPaymentRow,
    FinanceActualEntryRow,
    FinancePeriodRow,
    FinancePlanEntryRow,
    FinanceWeekRow,
)
from .model import DebtPayment, FinanceEntry, FinancePeriod, FinanceWeek, NewEntry, PeriodDraft


def to_week(row: FinanceWeekRow) -> FinanceWeek:
    return FinanceWeek(
        week_id=int(row.id),
        name=row.name,
        month=int(row.month),
        year=int(row.year),
        start_date=row.start_date,
        end_date=row.end_date,
        created_at=row.created_at,
    )


def _to_entry(row) -> FinanceEntry:
    return FinanceEntry(entry_id=int(row.id), category=FinanceCategory(row.category), amount=int(row.amount), data=row.data)


def _to_payment(row: DebtPaymentRow) -> DebtPayment:
    return DebtPayment(
        payment_id=int(row.id),
        period_id=int(row.period_id),
        term=int(row.term),
        amount=int(row.amount),
        paid_at=row.paid_at,
        note=row.note,
    )


def to_period(row: FinancePeriodRow) -> FinancePeriod:
    week = to_week(row.week) if row.week else None
    return FinancePeriod(
        period_id=int(row.id),
        name=row.name,
        month=week.month if week else int(row.month),
        year=week.year if week else int(row.year),
        start_date=week.start_date if week else row.start_date,
        end_date=week.end_date if week else row.end_date,
        week=week,
        plan_entries=tuple(_to_entry(e) for e in row.plans),
        actual_entries=tuple(_to_entry(e) for e in row.actuals),
        payments=tuple(_to_payment(p) for p in row.payments),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlFinanceRepository:
    def list_weeks(self) -> Sequence[FinanceWeek]:
        rows = FinanceWeekRow.query.order_by(
            FinanceWeekRow.year.desc(), FinanceWeekRow.month.desc(), FinanceWeekRow.start_date.desc()
        ).all()
        return [to_week(r) for r in rows]

    def get_week(self, week_id: int) -> Optional[FinanceWeek]:
        row = db.session.get(FinanceWeekRow, week_id)
        return to_week(row) if row else None

    def get_week_by_name(self, name: str) -> Optional[FinanceWeek]:
        row = FinanceWeekRow.query.filter_by(name=name).first()
        return to_week(row) if row else None

    def create_week(self, *, name: str, month: int, year: int, start: datetime, end: datetime) -> FinanceWeek:
        row = FinanceWeekRow(name=name, month=month, year=year, start_date=start, end_date=end)
        db.session.add(row)
        db.session.flush()
        return to_week(row)

    def list_periods(self, *, year: Optional[int] = None, with_week_only: bool = False) -> Sequence[FinancePeriod]:
        q = FinancePeriodRow.query
        if year is not None:
            q = q.filter(FinancePeriodRow.year == year)
        if with_week_only:
            q = q.filter(FinancePeriodRow.week_id.isnot(None))
        return [to_period(r) for r in q.order_by(FinancePeriodRow.start_date.desc(), FinancePeriodRow.id.desc()).all()]

    def get_period(self, period_id: int) -> Optional[FinancePeriod]:
        row = db.session.get(FinancePeriodRow, period_id)
        return to_period(row) if row else None

    def find_period_by_week(self, week_id: int) -> Optional[FinancePeriod]:
        row = (
            FinancePeriodRow.query.filter_by(week_id=week_id)
            .order_by(FinancePeriodRow.updated_at.desc(), FinancePeriodRow.id.desc())
            .first()
        )
        return to_period(row) if row else None

    def find_period_by_month(self, month: int, year: int) -> Optional[FinancePeriod]:
        row = FinancePeriodRow.query.filter_by(month=month, year=year).order_by(FinancePeriodRow.id.asc()).first()
        return to_period(row) if row else None

    def save_period(self, period_id: Optional[int], draft: PeriodDraft) -> FinancePeriod:
        row = db.session.get(FinancePeriodRow, period_id) if period_id else None
        if row is None:
            row = FinancePeriodRow()
            db.session.add(row)
        row.name = draft.name
        row.month = draft.month
        row.year = draft.year
        row.start_date = draft.start_date
        row.end_date = draft.end_date
        if draft.week_id is not None:
            row.week_id = draft.week_id
        db.session.flush()
        db.session.refresh(row)
        return to_period(row)

    def replace_plan_entries(self, period_id: int, entries: Sequence[NewEntry]) -> FinancePeriod:
        row = db.session.get(FinancePeriodRow, period_id)
        row.plans = [FinancePlanEntryRow(category=e.category.value, amount=e.amount, data=e.data) for e in entries]
        db.session.flush()
        db.session.refresh(row)
        return to_period(row)

    def replace_actual_entries(self, period_id: int, entries: Sequence[NewEntry]) -> FinancePeriod:
        row = db.session.get(FinancePeriodRow, period_id)
        row.actuals = [FinanceActualEntryRow(category=e.category.value, amount=e.amount, data=e.data) for e in entries]
        db.session.flush()
        db.session.refresh(row)
        return to_period(row)

    def add_payment(
        self, period_id: int, *, term: int, amount: int, paid_at: datetime, note: Optional[str]
    ) -> DebtPayment:
        row = DebtPaymentRow(period_id=period_id, term=term, amount=amount, paid_at=paid_at, note=note)
        db.session.add(row)
        db.session.flush()
        db.session.expire_all()
        return _to_payment(row)
