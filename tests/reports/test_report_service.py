from __future__ import annotations

from datetime import datetime

import pytest

from backoffice.b2b.model import B2BOrder, B2BOrderFilter
from backoffice.core.enums import B2BOutlet, InventoryStatus, Location
from backoffice.reports.service import ReportService
from backoffice.sales.model import NewSale, NewSaleItem, SaleFilter


class FakeB2BOrders:
    def __init__(self, orders):
        self.orders = orders

    def list_matching(self, flt):
        return [o for o in self.orders if flt.location is None or o.location == flt.location]


def _new_sale(outlet, **kw):
    base = dict(
        outlet=outlet,
        location=Location.BANDUNG,
        order_date=datetime(2025, 3, 5, 3, 0),
        customer=None,
        status=None,
        ship_date=None,
        discount=None,
        est_payout=None,
        act_payout=None,
    )
    base.update(kw)
    return NewSale(**base)


def _b2b(order_id, outlet, location, total):
    return B2BOrder(
        order_id=order_id, outlet=outlet, order_date=datetime(2025, 3, order_id), location=location, total_amount=total
    )


@pytest.fixture
def report(sales, inventory, products):
    cafe = sales.create(_new_sale("cafe", discount=10))
    sales.add_items(
        cafe.sale_id,
        [NewSaleItem(2, "C-1", 12_000, "Terjual"), NewSaleItem(2, "C-2", 12_000, "Display")],
    )
    shopee = sales.create(_new_sale("shopee", est_payout=85_000, act_payout=68_000, discount=10))
    sales.add_items(shopee.sale_id, [NewSaleItem(1, "S-1", 85_000)])
    sales.create(_new_sale("tokopedia", order_date=datetime(2025, 4, 5)))

    b2b = FakeB2BOrders(
        [
            _b2b(1, B2BOutlet.WHOLESALE, Location.BANDUNG, 500_000),
            _b2b(2, B2BOutlet.CAFE, Location.BANDUNG, 120_000),
            _b2b(3, B2BOutlet.WHOLESALE, Location.JAKARTA, 80_000),
        ]
    )
    return ReportService(sales, inventory, products, b2b)


MARCH = SaleFilter(start=datetime(2025, 2, 28, 17, 0), end=datetime(2025, 3, 31, 16, 59))


def test_sales_report_potongan(report):
    data = report.sales_report(MARCH)

    assert data["byOutlet"] == {
        "cafe": {"count": 1, "actual": 10_800, "potonganPct": 10.0},
        "shopee": {"count": 1, "actual": 68_000, "potonganPct": 20.0},
    }
    assert data["totalActual"] == 78_800
    assert data["avgPotonganPct"] == 18.8
    cafe_row = next(r for r in data["sales"] if r["outlet"] == "cafe")
    # only sold cafe items count
    assert cafe_row["subtotal"] == 12_000
    assert cafe_row["potongan"] == 1_200


def test_menu_items_report(report):
    data = report.menu_items_report(MARCH)

    brownies, hokkaido = data["menuItems"]
    assert brownies["productCode"] == "BRW"
    assert (brownies["totalQuantity"], brownies["totalRevenue"], brownies["totalHppValue"]) == (2, 24_000, 9_600)
    assert brownies["totalProfit"] == 14_400
    assert brownies["averagePrice"] == 12_000
    assert hokkaido["outlets"] == ["shopee"]
    assert data["totals"]["totalItems"] == 3
    assert data["totals"]["uniqueProducts"] == 2


def test_inventory_report(report, stock, inventory):
    sold, _ = stock(1, 2)
    inventory.set_status([sold.barcode], InventoryStatus.SOLD)
    stock(2, 1, Location.JAKARTA)

    data = report.inventory_report()

    assert data["byLocation"]["Bandung"] == {"Hokkaido Large (HOK-L)": 1, "Brownies (BRW)": 0}
    assert data["all"] == {"Hokkaido Large (HOK-L)": 1, "Brownies (BRW)": 1}
    bandung_hok = next(r for r in data["rows"] if r["location"] == "Bandung" and r["code"] == "HOK-L")
    assert (bandung_hok["ready"], bandung_hok["sold"]) == (1, 1)

    only_jakarta = report.inventory_report(location=Location.JAKARTA, product_code="brw")
    assert only_jakarta["byLocation"] == {"Jakarta": {"Brownies (BRW)": 1}}


def test_b2b_report(report):
    data = report.b2b_report(B2BOrderFilter(location=Location.BANDUNG))

    assert data["totalOrders"] == 2
    assert data["totalAmount"] == 620_000
    assert data["byOutlet"] == {"Wholesale": {"count": 1, "total": 500_000}, "Cafe": {"count": 1, "total": 120_000}}
