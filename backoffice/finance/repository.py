from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import DebtPayment, FinancePeriod, FinanceWeek, NewEntry, PeriodDraft


class FinanceRepository(Protocol):
    """Weeks, periods with their plan/actual entries, and debt payments."""

    def list_weeks(self) -> Sequence[FinanceWeek]:
        raise NotImplementedError

    def get_week(self, week_id: int) -> Optional[FinanceWeek]:
        raise NotImplementedError

    def get_week_by_name(self, name: str) -> Optional[FinanceWeek]:
        raise NotImplementedError

    def create_week(self, *, name: str, month: int, year: int, start: datetime, end: datetime) -> FinanceWeek:
        raise NotImplementedError

    def list_periods(self, *, year: Optional[int] = None, with_week_only: bool = False) -> Sequence[FinancePeriod]:
        """Newest start date first."""
        raise NotImplementedError

    def get_period(self, period_id: int) -> Optional[FinancePeriod]:
        raise NotImplementedError

    def find_period_by_week(self, week_id: int) -> Optional[FinancePeriod]:
        """Most recently updated period linked to the week."""
        raise NotImplementedError

    def find_period_by_month(self, month: int, year: int) -> Optional[FinancePeriod]:
        raise NotImplementedError

    def save_period(self, period_id: Optional[int], draft: PeriodDraft) -> FinancePeriod:
        """Update ``period_id`` when given, otherwise insert."""
        raise NotImplementedError

    def replace_plan_entries(self, period_id: int, entries: Sequence[NewEntry]) -> FinancePeriod:
        raise NotImplementedError

    def replace_actual_entries(self, period_id: int, entries: Sequence[NewEntry]) -> FinancePeriod:
        raise NotImplementedError

    def add_payment(
        self, period_id: int, *, term: int, amount: int, paid_at: datetime, note: Optional[str]
    ) -> DebtPayment:
        raise NotImplementedError
