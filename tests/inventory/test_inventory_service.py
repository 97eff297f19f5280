from __future__ import annotations

import pytest

from backoffice.core.enums import InventoryStatus, Location
from backoffice.core.exceptions import ConflictError, GoneError, NotFoundError, ValidationError
from backoffice.inventory.service import InventoryService


@pytest.fixture
def svc(inventory, products):
    return InventoryService(inventory, products)


def test_stock_in_resolves_product_from_barcode(svc, inventory):
    item = svc.stock_in(barcode="212-hok-l", location="Bandung")

    assert item.barcode == "212-HOK-L"
    assert item.product_id == 1
    assert item.status == InventoryStatus.READY
    assert inventory.get_by_barcode("212-HOK-L") is not None


def test_stock_in_rejects_duplicates_and_unknown_products(svc):
    svc.stock_in(barcode="343-BRW", location="Jakarta")

    with pytest.raises(ConflictError):
        svc.stock_in(barcode="343-BRW", location="Jakarta")
    with pytest.raises(NotFoundError):
        svc.stock_in(barcode="343-XYZ", location="Jakarta")
    with pytest.raises(ValidationError):
        svc.stock_in(barcode="344-BRW", location="Surabaya")


def test_stock_out_is_gone(svc):
    with pytest.raises(GoneError):
        svc.stock_out()


def test_move_and_remove(svc, inventory):
    svc.stock_in(barcode="343-BRW", location="Bandung")

    moved = svc.move(barcode="343-brw", to_location="Jakarta")
    assert moved.location == Location.JAKARTA

    svc.remove("343-BRW")
    assert inventory.get_by_barcode("343-BRW") is None
    with pytest.raises(NotFoundError):
        svc.remove("343-BRW")


def test_overview_lists_every_location_and_product(svc, stock):
    stock(1, 2, Location.BANDUNG)
    stock(1, 1, Location.JAKARTA)

    overview = svc.overview()

    assert overview["byLocation"]["Bandung"] == {"Hokkaido Large (HOK-L)": 2, "Brownies (BRW)": 0}
    assert overview["byLocation"]["Jakarta"]["Hokkaido Large (HOK-L)"] == 1
    assert overview["all"] == {"Hokkaido Large (HOK-L)": 3, "Brownies (BRW)": 0}


def test_set_stock_replaces_ready_units(svc, inventory, stock):
    stock(2, 4, Location.BANDUNG)
    sold = stock(2, 1, Location.BANDUNG, prefix="S")[0]
    inventory.set_status([sold.barcode], InventoryStatus.SOLD)

    result = svc.set_stock(product_id=2, location="Bandung", quantity=2)

    assert result.quantity == 2
    assert inventory.count_ready(2, Location.BANDUNG) == 2
    assert all(b.startswith("AUTO-BRW-") for b, i in inventory.items.items() if i.status == InventoryStatus.READY)
    assert inventory.get_by_barcode(sold.barcode).status == InventoryStatus.SOLD


def test_set_stock_to_zero_and_validation(svc, inventory, stock):
    stock(1, 3)
    svc.set_stock(product_id=1, location="Bandung", quantity=0)
    assert inventory.count_ready(1, Location.BANDUNG) == 0

    with pytest.raises(ValidationError):
        svc.set_stock(product_id=None, location="Bandung", quantity=1)
    with pytest.raises(NotFoundError):
        svc.set_stock(product_id=99, location="Bandung", quantity=1)
