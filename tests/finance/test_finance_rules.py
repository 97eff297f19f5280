from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from backoffice.core.enums import FinanceCategory, Location, PaymentStatus
from backoffice.core.exceptions import NotFoundError, ValidationError
from backoffice.finance.model import DebtPayment, FinanceEntry, FinancePeriod, FinanceWeek
from backoffice.finance.revenue import order_omset, revenue_by_outlet, summarize_entries, total_omset_paid
from backoffice.finance.service import FinanceService, parse_entries
from backoffice.orders.model import DeliveryRef, Order, OrderItem
from backoffice.sales.model import Sale, SaleItem

MARCH_START = datetime(2025, 2, 28, 17, 0)
MARCH_END = datetime(2025, 3, 31, 16, 59, 59)


def _order(order_id=1, **kw):
    base = dict(
        order_id=order_id,
        outlet="whatsapp",
        customer="X",
        status=PaymentStatus.PAID,
        order_date=datetime(2025, 3, 5, 3, 0),
        location=Location.BANDUNG,
        total_amount=100_000,
        items=(OrderItem(1, 1, 1, 85_000),),
    )
    base.update(kw)
    return Order(**base)


def _sale(sale_id, outlet, prices, **kw):
    items = tuple(SaleItem(n, sale_id, 1, f"B{sale_id}-{n}", p) for n, p in enumerate(prices))
    return Sale(sale_id, outlet, Location.BANDUNG, datetime(2025, 3, 5, 3, 0), items=items, **kw)


def test_sale_revenue_fallbacks():
    rows = revenue_by_outlet(
        [
            _sale(1, "shopee", [10_000], act_payout=9_000),
            _sale(2, "shopee", [10_000], actual_received=8_000),
            _sale(3, "cafe", [5_000, 7_000]),
        ]
    )
    assert rows == [{"outlet": "cafe", "amount": 12_000}, {"outlet": "shopee", "amount": 17_000}]


def test_order_omset_by_outlet():
    assert order_omset(_order(outlet="free")) == 0
    assert order_omset(_order(outlet="Cafe", act_payout=70_000)) == 70_000
    assert order_omset(_order(outlet="cafe")) == 0
    assert order_omset(_order(outlet="tokopedia", act_payout=90_000)) == 90_000
    assert order_omset(_order(outlet="tokopedia")) == 100_000


def test_whatsapp_omset_excludes_shipping_and_overrun():
    order = _order(
        ongkir_plan=15_000,
        deliveries=(DeliveryRef(1, "delivered", ongkir_actual=20_000, ongkir_plan=15_000),),
    )
    assert order_omset(order) == 100_000 - 15_000 - 5_000

    pending = replace(order, deliveries=(DeliveryRef(1, "pending", ongkir_actual=20_000, ongkir_plan=15_000),))
    assert order_omset(pending) == 85_000


def test_total_omset_paid_skips_unpaid():
    orders = [_order(1), _order(2, status=PaymentStatus.NOT_PAID), _order(3, outlet="shopee", total_amount=50_000)]
    assert total_omset_paid(orders) == 150_000


def test_parse_entries():
    entries = parse_entries([{"category": "BAHAN", "amount": 1000.6, "data": {"note": "flour"}}])
    assert entries[0].category == FinanceCategory.BAHAN
    assert entries[0].amount == 1001

    for bad in ("x", [{"amount": 1}], [{"category": "FOOD", "amount": 1}], [{"category": "BAHAN", "amount": -1}]):
        with pytest.raises(ValidationError):
            parse_entries(bad)
    with pytest.raises(ValidationError):
        parse_entries([{"category": "BAHAN", "amount": True}])


def test_summarize_entries_groups_by_category():
    summary = summarize_entries(
        [
            FinanceEntry(1, FinanceCategory.BAHAN, 100, {"item": "flour"}),
            FinanceEntry(2, FinanceCategory.PAYROLL, 300),
            FinanceEntry(3, FinanceCategory.BAHAN, 50),
        ]
    )
    assert summary["total"] == 450
    assert summary["byCategory"][0] == {"category": "BAHAN", "amount": 150, "data": [{"item": "flour"}]}


class _Finance:
    def __init__(self, periods):
        self.periods = {p.period_id: p for p in periods}
        self.payments = []

    def get_period(self, period_id):
        return self.periods.get(period_id)

    def list_periods(self, *, year=None, with_week_only=False):
        return [p for p in self.periods.values() if not with_week_only or p.week is not None]

    def add_payment(self, period_id, *, term, amount, paid_at, note):
        payment = DebtPayment(len(self.payments) + 1, period_id, term, amount, paid_at, note)
        self.payments.append(payment)
        return payment


class _Sales:
    def __init__(self, sales):
        self.sales = sales

    def list_between(self, start, end):
        return [s for s in self.sales if start <= s.order_date <= end]


class _Orders:
    def __init__(self, orders):
        self.orders = orders

    def list_between(self, start, end):
        return [o for o in self.orders if start <= o.order_date <= end]


@pytest.fixture
def period():
    week = FinanceWeek(7, "Maret W1", 3, 2025, MARCH_START, MARCH_END)
    return FinancePeriod(
        period_id=1,
        name="",
        month=3,
        year=2025,
        start_date=MARCH_START,
        end_date=MARCH_END,
        week=week,
        plan_entries=(FinanceEntry(1, FinanceCategory.BAHAN, 300_000),),
        actual_entries=(FinanceEntry(2, FinanceCategory.BAHAN, 250_000),),
        payments=(DebtPayment(1, 1, 1, 40_000),),
    )


@pytest.fixture
def finance_svc(period, products):
    orders = _Orders(
        [
            _order(1, total_amount=100_000),
            _order(2, outlet="shopee", status=PaymentStatus.NOT_PAID, total_amount=60_000),
        ]
    )
    sales = _Sales([_sale(1, "shopee", [10_000], act_payout=9_000)])
    return FinanceService(_Finance([period]), sales, orders, products, clock=lambda: datetime(2025, 3, 20, 5, 0))


def test_metrics(finance_svc):
    m = finance_svc.metrics(period_id=1)

    assert m["from"] == MARCH_START.isoformat()
    assert m["actualRevenue"] == 9_000
    # one Hokkaido Large per order at hpp 29750
    assert m["bahanBudget"] == 2 * 29_750
    assert m["totalOmsetPaid"] == 100_000
    assert m["danaTertahan"] == [{"outlet": "shopee", "amount": 60_000}]
    assert m["totalPlan"] == 300_000
    assert m["netMargin"] == 9_000 - 300_000
    assert m["pinjamModal"] == 200_000


def test_debt_ledger(finance_svc):
    ledger = finance_svc.debt_ledger()

    (row,) = ledger["rows"]
    assert row["weekName"] == "Maret W1"
    assert row["totalOmsetPaid"] == 100_000
    assert row["pinjamModal"] == 150_000
    assert row["remaining"] == 110_000
    assert ledger["summary"] == {"totalPinjamModal": 150_000, "totalPaid": 40_000, "totalRemaining": 110_000}

    with pytest.raises(NotFoundError):
        finance_svc.debt_ledger(period_id=99)


def test_add_payment_numbers_terms(finance_svc):
    payment = finance_svc.add_payment({"periodId": 1, "amount": 25_000})
    assert payment.term == 2
    assert payment.paid_at == datetime(2025, 3, 20, 5, 0)

    with pytest.raises(ValidationError):
        finance_svc.add_payment({"periodId": 1, "amount": 0})
