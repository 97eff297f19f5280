from __future__ import annotations

from datetime import datetime

import pytest

from backoffice.core.enums import Location
from backoffice.products.model import Product

from tests.fakes import InMemoryDeliveries, InMemoryInventory, InMemoryOrders, InMemoryProducts, InMemorySales


@pytest.fixture
def fixed_now():
    # 2025-03-10 09:15 in Jakarta
    return datetime(2025, 3, 10, 2, 15, 0)


@pytest.fixture
def products():
    return InMemoryProducts(
        [
            Product(1, "HOK-L", "Hokkaido Large", 85000, 0.35, 29750),
            Product(2, "BRW", "Brownies", 12000, 0.4, 4800),
        ]
    )


@pytest.fixture
def inventory():
    return InMemoryInventory()


@pytest.fixture
def orders(products):
    return InMemoryOrders(products)


@pytest.fixture
def deliveries(orders):
    return InMemoryDeliveries(orders)


@pytest.fixture
def stock(inventory):
    """Put ``n`` READY units of a product on the shelf at a location."""

    def _stock(product_id: int, n: int, location: Location = Location.BANDUNG, prefix: str = "U"):
        return [inventory.add(f"{prefix}{product_id}-{location.value.upper()}-{i}", location, product_id) for i in range(n)]

    return _stock


@pytest.fixture
def sales():
    return InMemorySales()
