from __future__ import annotations

import pytest

from backoffice.core.enums import InventoryStatus, Location
from backoffice.core.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.sales.service import SaleService


@pytest.fixture
def svc(sales, inventory, products):
    return SaleService(sales, inventory, products)


def test_sale_sells_ready_barcodes(svc, inventory, stock):
    units = stock(1, 2) + stock(2, 1)

    sale = svc.create_sale(
        {
            "outlet": "shopee",
            "location": "Bandung",
            "orderDate": "2025-03-05T12:00:00",
            "items": [u.barcode.lower() for u in units],
        }
    )

    assert sale.est_payout == 85_000 * 2 + 12_000
    assert sale.act_payout is None
    assert sale.status == "ordered"
    assert [i.price for i in sale.items] == [85_000, 85_000, 12_000]
    assert all(inventory.get_by_barcode(u.barcode).status == InventoryStatus.SOLD for u in units)


def test_whatsapp_and_cafe_get_discounted_payout(svc, stock):
    wa = svc.create_sale(
        {"outlet": "whatsapp", "location": "Bandung", "discount": 10, "items": [u.barcode for u in stock(1, 1)]}
    )
    assert wa.act_payout == 76_500

    cafe = svc.create_sale({"outlet": "Cafe", "location": "Bandung", "items": [u.barcode for u in stock(2, 2, prefix="C")]})
    assert cafe.act_payout == 24_000
    assert cafe.status == "Display"
    assert {i.status for i in cafe.items} == {"Display"}


def test_barcodes_must_be_ready_at_location(svc, inventory, stock):
    (here,) = stock(1, 1)
    (there,) = stock(1, 1, Location.JAKARTA)

    with pytest.raises(ConflictError) as exc:
        svc.create_sale({"outlet": "shopee", "location": "Bandung", "items": [here.barcode, there.barcode]})
    assert exc.value.payload == {"barcodes": [there.barcode]}

    with pytest.raises(ValidationError):
        svc.create_sale({"outlet": "shopee", "location": "Bandung", "items": [here.barcode, here.barcode]})
    with pytest.raises(NotFoundError):
        svc.create_sale({"outlet": "shopee", "location": "Bandung", "items": ["NOPE-1"]})
    assert inventory.get_by_barcode(here.barcode).status == InventoryStatus.READY


def test_delete_sale_and_item_restore_stock(svc, inventory, stock):
    units = stock(2, 3)
    sale = svc.create_sale({"outlet": "shopee", "location": "Bandung", "items": [u.barcode for u in units]})

    removed = svc.delete_item(sale.items[0].item_id)
    assert inventory.get_by_barcode(removed.barcode).status == InventoryStatus.READY
    assert svc.get_sale(sale.sale_id).est_payout == 24_000

    svc.delete_sale(sale.sale_id)
    assert all(i.status == InventoryStatus.READY for i in inventory.items.values())
    with pytest.raises(NotFoundError):
        svc.get_sale(sale.sale_id)


def test_add_item_to_existing_sale(svc, inventory, stock):
    sale = svc.create_sale({"outlet": "tokopedia", "location": "Bandung"})
    (unit,) = stock(1, 1)

    item = svc.add_item(sale.sale_id, barcode=unit.barcode)

    assert item.price == 85_000
    assert svc.get_sale(sale.sale_id).est_payout == 85_000
    with pytest.raises(ConflictError):
        svc.add_item(sale.sale_id, barcode=unit.barcode)


def test_estimate_applies_discount_only_for_whatsapp_and_cafe(svc, stock):
    codes = [u.barcode for u in stock(2, 2)]

    assert svc.estimate({"barcodes": codes, "outlet": "whatsapp", "discount": 50}) == {
        "subtotal": 24_000,
        "discountPct": 50,
        "total": 12_000,
    }
    assert svc.estimate({"barcodes": codes, "outlet": "shopee", "discount": 50})["total"] == 24_000
    assert svc.estimate({"barcodes": codes, "location": "Jakarta"})["subtotal"] == 0
    assert svc.estimate({})["total"] == 0


def test_estimate_accepts_items_key(svc, stock):
    (unit,) = stock(2, 1)

    estimate = svc.estimate(
        {"outlet": "whatsapp", "location": "Bandung", "items": [unit.barcode.lower()], "discount": 10}
    )

    assert estimate == {"subtotal": 12_000, "discountPct": 10, "total": 10_800}
