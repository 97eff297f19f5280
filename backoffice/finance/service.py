from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date, datetime
from typing import Any, Callable, ContextManager, Optional

from ..common.datetime_utils import (
    end_of_day_jakarta,
    jakarta_today,
    now_utc,
    parse_datetime,
    parse_iso_date,
    parse_optional_date,
    start_of_day_jakarta,
)
from ..common.money import round_half_up
from ..common.validators import optional_int, require_int, require_non_empty, require_number
from ..core.enums import FinanceCategory, PaymentStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..orders.repository import OrderRepository
from ..products.repository import ProductRepository
from ..sales.repository import SaleRepository
from .model import DebtPayment, FinancePeriod, FinanceWeek, NewEntry, PeriodDraft
from .repository import FinanceRepository
from .revenue import revenue_by_outlet, sale_revenue, summarize_entries, total_omset_paid

logger = logging.getLogger(__name__)


def parse_entries(raw: Any) -> list[NewEntry]:
    if not isinstance(raw, list):
        raise ValidationError("entries must be an array")
    entries = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("category"), str):
            raise ValidationError("each entry must include category")
        try:
            category = FinanceCategory(item["category"])
        except ValueError:
            raise ValidationError(f"Invalid category: {item['category']}")
        amount = item.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount != amount:
            raise ValidationError("entry.amount must be a non-negative number")
        amount = round_half_up(amount)
        if amount < 0:
            raise ValidationError("entry.amount must be a non-negative number")
        entries.append(NewEntry(category=category, amount=amount, data=item.get("data")))
    return entries


class FinanceService:
    """Weekly plans, monthly actuals, derived metrics and the working-capital debt ledger."""

    def __init__(
        self,
        finance: FinanceRepository,
        sales: SaleRepository,
        orders: OrderRepository,
        products: ProductRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._finance = finance
        self._sales = sales
        self._orders = orders
        self._products = products
        self._tx = transaction
        self._clock = clock

    # weeks

    def list_weeks(self) -> list[FinanceWeek]:
        return list(self._finance.list_weeks())

    def create_week(self, body: dict) -> FinanceWeek:
        name = require_non_empty(body.get("name"), "name")
        month = require_int(body.get("month"), "month", minimum=1)
        if month > 12:
            raise ValidationError("month must be between 1 and 12")
        year = require_int(body.get("year"), "year", minimum=2000)
        start = start_of_day_jakarta(parse_iso_date(body.get("startDate")))
        end = end_of_day_jakarta(parse_iso_date(body.get("endDate")))
        if end < start:
            raise ValidationError("endDate must be after startDate")
        if self._finance.get_week_by_name(name):
            raise ConflictError("Week name already exists")
        with self._tx():
            return self._finance.create_week(name=name, month=month, year=year, start=start, end=end)

    # plan

    def save_plan(self, body: dict) -> FinancePeriod:
        payload = body.get("period")
        if not isinstance(payload, dict):
            raise ValidationError("period is required")
        entries = parse_entries(body.get("entries"))
        week_id = require_int(payload.get("weekId"), "period.weekId", minimum=1)
        week = self._finance.get_week(week_id)
        if not week:
            raise NotFoundError("Finance week not found")

        period_id = optional_int(payload.get("id"), "period.id", minimum=1)
        existing = self._finance.get_period(period_id) if period_id else None
        if existing is None:
            existing = self._finance.find_period_by_week(week_id)

        draft = PeriodDraft(
            name=(payload.get("name") or "").strip() or week.name,
            month=week.month,
            year=week.year,
            start_date=week.start_date,
            end_date=week.end_date,
            week_id=week.week_id,
        )
        with self._tx():
            period = self._finance.save_period(existing.period_id if existing else None, draft)
            period = self._finance.replace_plan_entries(period.period_id, entries)
        logger.info("plan saved for period %s (%d entries)", period.period_id, len(entries))
        return period

    def list_periods(self) -> list[FinancePeriod]:
        return list(self._finance.list_periods())

    def find_period(self, *, period_id: Optional[int] = None, week_id: Optional[int] = None) -> FinancePeriod:
        period = None
        if period_id:
            period = self._finance.get_period(period_id)
        elif week_id:
            period = self._finance.find_period_by_week(week_id)
        if not period:
            raise NotFoundError("Finance period not found", payload={"period": None})
        return period

    # actual

    def save_actual(self, body: dict) -> FinancePeriod:
        payload = body.get("period")
        if not isinstance(payload, dict):
            raise ValidationError("period is required")
        entries = parse_entries(body.get("entries"))
        name = require_non_empty(payload.get("name"), "period.name")
        month = require_int(payload.get("month"), "period.month", minimum=1)
        if month > 12:
            raise ValidationError("period.month must be between 1 and 12")
        year = require_int(payload.get("year"), "period.year", minimum=2000)
        start = start_of_day_jakarta(parse_iso_date(payload.get("startDate")))
        end = end_of_day_jakarta(parse_iso_date(payload.get("endDate")))
        if end < start:
            raise ValidationError("period.endDate must be after startDate")

        period_id = optional_int(payload.get("id"), "period.id", minimum=1)
        existing = self._finance.get_period(period_id) if period_id else None
        if existing is None:
            existing = self._finance.find_period_by_month(month, year)

        draft = PeriodDraft(name=name, month=month, year=year, start_date=start, end_date=end)
        with self._tx():
            period = self._finance.save_period(existing.period_id if existing else None, draft)
            return self._finance.replace_actual_entries(period.period_id, entries)

    def find_actual_period(
        self, *, period_id: Optional[int] = None, month: Optional[int] = None, year: Optional[int] = None
    ) -> FinancePeriod:
        period = None
        if period_id:
            period = self._finance.get_period(period_id)
        elif month and year:
            period = self._finance.find_period_by_month(month, year)
        if not period:
            raise NotFoundError("Finance period not found", payload={"period": None})
        return period

    # metrics and report

    def _range(self, start_raw: Optional[str], end_raw: Optional[str]) -> tuple[datetime, datetime]:
        now = self._clock()
        start_day = parse_optional_date(start_raw)
        end_day = parse_optional_date(end_raw)
        today = jakarta_today(now)
        start = start_of_day_jakarta(start_day or date(today.year, today.month, 1))
        end = end_of_day_jakarta(end_day) if end_day else now
        return start, end

    def metrics(self, *, start: Optional[str] = None, end: Optional[str] = None, period_id: Optional[int] = None) -> dict:
        start_at, end_at = self._range(start, end)
        sales = self._sales.list_between(start_at, end_at)
        orders = self._orders.list_between(start_at, end_at)

        by_outlet = revenue_by_outlet(sales)
        actual_revenue = sum(row["amount"] for row in by_outlet)

        product_ids = {i.product_id for o in orders for i in o.items}
        products = self._products.get_many(product_ids)
        bahan_budget = sum(
            i.quantity * products[i.product_id].hpp_value for o in orders for i in o.items if i.product_id in products
        )

        total_paid = sum(o.total_amount for o in orders if o.status == PaymentStatus.PAID)
        held: dict[str, int] = {}
        for o in orders:
            if o.status == PaymentStatus.NOT_PAID:
                held[o.outlet] = held.get(o.outlet, 0) + o.total_amount
        dana_tertahan = sorted(
            ({"outlet": k, "amount": v} for k, v in held.items() if v > 0), key=lambda r: r["amount"], reverse=True
        )

        period = self._finance.get_period(period_id) if period_id else None
        plan_entries = period.plan_entries if period else ()
        actual_entries = period.actual_entries if period else ()
        total_plan = sum(e.amount for e in plan_entries)
        total_actual = sum(e.amount for e in actual_entries)

        return {
            "from": start_at.isoformat(),
            "to": end_at.isoformat(),
            "actualRevenueByOutlet": by_outlet,
            "actualRevenue": actual_revenue,
            "bahanBudget": bahan_budget,
            "totalOmsetPaid": total_paid,
            "danaTertahan": dana_tertahan,
            "totalPlan": total_plan,
            "planEntries": [e.to_dict() for e in plan_entries],
            "totalActual": total_actual,
            "actualEntries": [e.to_dict() for e in actual_entries],
            "netMargin": actual_revenue - total_plan,
            "pinjamModal": max(0, total_plan - total_paid),
        }

    def report(self, *, year: Optional[int] = None) -> list[dict]:
        reports = []
        for period in sorted(self._finance.list_periods(year=year), key=lambda p: (p.year, p.month), reverse=True):
            revenue = sum(sale_revenue(s) for s in self._sales.list_between(period.start_date, period.end_date))
            plan = summarize_entries(period.plan_entries)
            actual = summarize_entries(period.actual_entries)
            reports.append(
                {
                    "periodId": period.period_id,
                    "name": period.display_name,
                    "month": period.month,
                    "year": period.year,
                    "startDate": period.start_date.isoformat(),
                    "endDate": period.end_date.isoformat(),
                    "actualRevenue": revenue,
                    "plan": plan,
                    "actual": actual,
                    "netProfitPlan": revenue - plan["total"],
                    "netProfitActual": revenue - actual["total"],
                }
            )
        return reports

    # debt

    def _debt_row(self, period: FinancePeriod) -> dict:
        omset = total_omset_paid(self._orders.list_between(period.start_date, period.end_date))
        pinjam_modal = max(period.total_actual - omset, 0)
        return {
            "periodId": period.period_id,
            "weekId": period.week_id,
            "weekName": period.week.name if period.week else period.display_name,
            "startDate": period.start_date.isoformat(),
            "endDate": period.end_date.isoformat(),
            "totalActual": period.total_actual,
            "totalOmsetPaid": omset,
            "pinjamModal": pinjam_modal,
            "payments": [p.to_dict() for p in period.payments],
            "totalPaid": period.total_paid,
            "remaining": max(pinjam_modal - period.total_paid, 0),
        }

    def debt_ledger(self, *, period_id: Optional[int] = None) -> dict:
        if period_id:
            period = self._finance.get_period(period_id)
            if not period:
                raise NotFoundError("Finance period not found")
            return {"period": period.to_dict(), "totals": self._debt_row(period)}

        rows = [self._debt_row(p) for p in self._finance.list_periods(with_week_only=True)]
        return {
            "rows": rows,
            "summary": {
                "totalPinjamModal": sum(r["pinjamModal"] for r in rows),
                "totalPaid": sum(r["totalPaid"] for r in rows),
                "totalRemaining": sum(r["remaining"] for r in rows),
            },
        }

    def add_payment(self, body: dict) -> DebtPayment:
        period_id = require_int(body.get("periodId"), "periodId", minimum=1)
        amount = round_half_up(require_number(body.get("amount"), "amount"))
        if amount <= 0:
            raise ValidationError("amount must be greater than 0")
        period = self._finance.get_period(period_id)
        if not period:
            raise NotFoundError("Finance period not found")
        paid_at = parse_datetime(body["paidAt"]) if body.get("paidAt") else self._clock()
        note = (body.get("note") or "").strip() or None
        with self._tx():
            return self._finance.add_payment(
                period_id, term=len(period.payments) + 1, amount=amount, paid_at=paid_at, note=note
            )
