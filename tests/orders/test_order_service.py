from __future__ import annotations

from datetime import datetime

import pytest

from backoffice.common.pagination import PageRequest
from backoffice.core.enums import Location, PaymentStatus
from backoffice.core.exceptions import NotFoundError, ValidationError
from backoffice.orders.model import DeliveryRef
from backoffice.orders.service import OrderService


@pytest.fixture
def svc(orders, products):
    return OrderService(orders, products)


def _body(**overrides):
    body = {
        "outlet": "whatsapp",
        "customer": "Pak Budi",
        "location": "Jakarta",
        "orderDate": "2025-03-01T10:00:00",
        "items": [{"productId": 1, "quantity": 1}, {"productId": 2, "quantity": 2}, {"productId": 1, "quantity": 1}],
    }
    body.update(overrides)
    return body


def test_create_order_prices_from_catalog_and_merges_lines(svc):
    order = svc.create_order(_body(discount=10, ongkirPlan=20000, status="not_paid"))

    assert [(i.product_id, i.quantity, i.price) for i in order.items] == [(1, 2, 85000), (2, 2, 12000)]
    assert order.status == PaymentStatus.NOT_PAID
    # (170000 + 24000) * 0.9 + 20000
    assert order.total_amount == 194600


def test_shipping_only_for_whatsapp_without_pickup(svc):
    assert svc.create_order(_body(outlet="Tokopedia", ongkirPlan=20000)).ongkir_plan == 0
    assert svc.create_order(_body(selfPickup=True, ongkirPlan=20000)).ongkir_plan == 0
    assert svc.create_order(_body(ongkirPlan=20000)).ongkir_plan == 20000


def test_missing_products_are_reported(svc):
    with pytest.raises(ValidationError) as exc:
        svc.create_order(_body(items=[{"productId": 7, "quantity": 1}, {"productId": 1, "quantity": 1}]))
    assert exc.value.payload == {"missingProductIds": [7]}


@pytest.mark.parametrize(
    "overrides",
    [
        {"items": []},
        {"items": [{"productId": 1, "quantity": 0}]},
        {"location": "Surabaya"},
        {"discount": 120},
        {"ongkirPlan": -1},
        {"deliveryDate": "2025-02-27T10:00:00"},
    ],
)
def test_invalid_orders_are_rejected(svc, overrides):
    with pytest.raises(ValidationError):
        svc.create_order(_body(**overrides))


def test_delivery_date_compares_against_the_jakarta_order_day(svc):
    # 06:30 and 08:00 WIB fall on different UTC days but the same Jakarta day
    accepted = svc.create_order(_body(orderDate="2025-03-10T08:00:00", deliveryDate="2025-03-10T06:30:00"))
    assert accepted.delivery_date == datetime(2025, 3, 9, 23, 30)

    with pytest.raises(ValidationError):
        svc.create_order(_body(orderDate="2025-03-10T06:00:00", deliveryDate="2025-03-09T20:00:00"))


def test_delivered_order_is_locked(svc, orders):
    order = svc.create_order(_body())
    orders.attach_delivery(order.order_id, DeliveryRef(1, "delivered"))

    with pytest.raises(ValidationError):
        svc.update_order(order.order_id, _body(customer="Someone else"))
    with pytest.raises(ValidationError):
        svc.delete_order(order.order_id)


def test_update_and_delete(svc):
    order = svc.create_order(_body())

    updated = svc.update_order(order.order_id, _body(items=[{"productId": 2, "quantity": 5}]))
    assert updated.total_amount == 60000

    svc.delete_order(order.order_id)
    with pytest.raises(NotFoundError):
        svc.get_order(order.order_id)


def test_pending_orders_sorted_by_delivery_date(svc, orders):
    late = svc.create_order(_body(deliveryDate="2025-03-09T10:00:00"))
    undated = svc.create_order(_body())
    soon = svc.create_order(_body(deliveryDate="2025-03-03T10:00:00"))
    done = svc.create_order(_body(deliveryDate="2025-03-02T10:00:00"))
    orders.attach_delivery(done.order_id, DeliveryRef(1, "delivered"))

    rows, total = svc.pending_orders(location=Location.JAKARTA, search=None, page=PageRequest(1, 10))

    assert total == 3
    assert [o.order_id for o in rows] == [soon.order_id, late.order_id, undated.order_id]
    assert rows[0].delivery_date == datetime(2025, 3, 3, 3, 0)
