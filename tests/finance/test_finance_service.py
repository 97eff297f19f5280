from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from backoffice.core.enums import FinanceCategory
from backoffice.core.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.finance.model import FinanceEntry, FinancePeriod, FinanceWeek
from backoffice.finance.service import FinanceService


class InMemoryFinance:
    def __init__(self):
        self.weeks: dict[int, FinanceWeek] = {}
        self.periods: dict[int, FinancePeriod] = {}

    def list_weeks(self):
        return list(self.weeks.values())

    def get_week(self, week_id):
        return self.weeks.get(week_id)

    def get_week_by_name(self, name):
        return next((w for w in self.weeks.values() if w.name == name), None)

    def create_week(self, *, name, month, year, start, end):
        week = FinanceWeek(len(self.weeks) + 1, name, month, year, start, end)
        self.weeks[week.week_id] = week
        return week

    def get_period(self, period_id):
        return self.periods.get(period_id)

    def find_period_by_week(self, week_id):
        return next((p for p in self.periods.values() if p.week_id == week_id), None)

    def find_period_by_month(self, month, year):
        return next((p for p in self.periods.values() if (p.month, p.year) == (month, year)), None)

    def save_period(self, period_id, draft):
        period_id = period_id or len(self.periods) + 1
        current = self.periods.get(period_id) or FinancePeriod(period_id, "", 0, 0, draft.start_date, draft.end_date)
        self.periods[period_id] = replace(
            current,
            name=draft.name,
            month=draft.month,
            year=draft.year,
            start_date=draft.start_date,
            end_date=draft.end_date,
            week=self.weeks.get(draft.week_id) if draft.week_id else None,
        )
        return self.periods[period_id]

    def _entries(self, entries):
        return tuple(FinanceEntry(n, e.category, e.amount, e.data) for n, e in enumerate(entries, start=1))

    def replace_plan_entries(self, period_id, entries):
        self.periods[period_id] = replace(self.periods[period_id], plan_entries=self._entries(entries))
        return self.periods[period_id]

    def replace_actual_entries(self, period_id, entries):
        self.periods[period_id] = replace(self.periods[period_id], actual_entries=self._entries(entries))
        return self.periods[period_id]


@pytest.fixture
def finance():
    return InMemoryFinance()


@pytest.fixture
def svc(finance, sales, orders, products):
    return FinanceService(finance, sales, orders, products)


def _week_body(**kw):
    body = {"name": "Maret W1", "month": 3, "year": 2025, "startDate": "2025-03-01", "endDate": "2025-03-07"}
    body.update(kw)
    return body


def _actual_body(entries, **kw):
    period = {"name": "Maret", "month": 3, "year": 2025, "startDate": "2025-03-01", "endDate": "2025-03-31"}
    period.update(kw)
    return {"period": period, "entries": entries}


def test_week_bounds_are_jakarta_days(svc):
    week = svc.create_week(_week_body())

    assert week.start_date == datetime(2025, 2, 28, 17, 0)
    assert week.end_date == datetime(2025, 3, 7, 16, 59, 59, 999000)


def test_week_name_is_unique(svc):
    svc.create_week(_week_body())

    with pytest.raises(ConflictError):
        svc.create_week(_week_body(startDate="2025-03-08", endDate="2025-03-14"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"startDate": "2025-03-07", "endDate": "2025-03-01"},
        {"month": 13},
        {"name": ""},
        {"endDate": "07/03/2025"},
    ],
)
def test_week_rejects_bad_input(svc, overrides):
    with pytest.raises(ValidationError):
        svc.create_week(_week_body(**overrides))


def test_single_day_week_is_allowed(svc):
    week = svc.create_week(_week_body(endDate="2025-03-01"))

    assert week.end_date > week.start_date


def test_save_plan_upserts_by_week_and_replaces_entries(svc, finance):
    week = svc.create_week(_week_body())

    first = svc.save_plan(
        {
            "period": {"weekId": week.week_id},
            "entries": [{"category": "BAHAN", "amount": 300_000}, {"category": "PAYROLL", "amount": 100_000}],
        }
    )
    assert first.name == "Maret W1"
    assert (first.month, first.year, first.start_date) == (3, 2025, week.start_date)
    assert first.total_plan == 400_000

    second = svc.save_plan(
        {"period": {"weekId": week.week_id, "name": "Minggu 1"}, "entries": [{"category": "BAHAN", "amount": 250_000}]}
    )
    assert second.period_id == first.period_id
    assert second.name == "Minggu 1"
    assert [(e.category, e.amount) for e in second.plan_entries] == [(FinanceCategory.BAHAN, 250_000)]
    assert len(finance.periods) == 1


def test_save_plan_prefers_explicit_period_id(svc, finance):
    w1 = svc.create_week(_week_body())
    w2 = svc.create_week(_week_body(name="Maret W2", startDate="2025-03-08", endDate="2025-03-14"))
    period = svc.save_plan({"period": {"weekId": w1.week_id}, "entries": []})

    moved = svc.save_plan({"period": {"id": period.period_id, "weekId": w2.week_id}, "entries": []})

    assert moved.period_id == period.period_id
    assert moved.week_id == w2.week_id
    assert len(finance.periods) == 1


def test_save_plan_errors(svc):
    with pytest.raises(ValidationError):
        svc.save_plan({"entries": []})
    with pytest.raises(NotFoundError):
        svc.save_plan({"period": {"weekId": 42}, "entries": []})


def test_save_actual_upserts_by_month(svc, finance):
    first = svc.save_actual(_actual_body([{"category": "BAHAN", "amount": 120_000}]))
    assert first.week is None
    assert first.end_date == datetime(2025, 3, 31, 16, 59, 59, 999000)

    again = svc.save_actual(_actual_body([{"category": "BUILDING", "amount": 80_000}], name="Maret revisi"))

    assert again.period_id == first.period_id
    assert again.name == "Maret revisi"
    assert [(e.category, e.amount) for e in again.actual_entries] == [(FinanceCategory.BUILDING, 80_000)]
    assert len(finance.periods) == 1

    april = svc.save_actual(_actual_body([], month=4, startDate="2025-04-01", endDate="2025-04-30"))
    assert april.period_id != first.period_id


def test_save_actual_by_id_can_change_month(svc, finance):
    period = svc.save_actual(_actual_body([]))

    moved = svc.save_actual(
        _actual_body([], id=period.period_id, month=4, startDate="2025-04-01", endDate="2025-04-30")
    )

    assert moved.period_id == period.period_id
    assert moved.month == 4
    assert len(finance.periods) == 1


def test_save_actual_validates_period(svc):
    with pytest.raises(ValidationError):
        svc.save_actual(_actual_body([], endDate="2025-02-01"))
    with pytest.raises(ValidationError):
        svc.save_actual(_actual_body([], month=0))
