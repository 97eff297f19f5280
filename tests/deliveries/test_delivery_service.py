from __future__ import annotations

import pytest

from backoffice.core.enums import DeliveryStatus, InventoryStatus, Location
from backoffice.core.exceptions import ConflictError, NotFoundError, ShortageError, ValidationError
from backoffice.deliveries.service import DeliveryService
from backoffice.orders.service import OrderService


@pytest.fixture
def order_service(orders, products):
    return OrderService(orders, products)


@pytest.fixture
def svc(deliveries, orders, inventory):
    return DeliveryService(deliveries, orders, inventory)


def _order(order_service, **overrides):
    body = {
        "outlet": "whatsapp",
        "customer": "Bu Rina",
        "location": "Bandung",
        "orderDate": "2025-03-01T10:00:00",
        "ongkirPlan": 15000,
        "items": [{"productId": 1, "quantity": 2}, {"productId": 2, "quantity": 3}],
    }
    body.update(overrides)
    return order_service.create_order(body)


def test_full_delivery_marks_oldest_stock_sold(svc, order_service, stock, inventory):
    order = _order(order_service)
    first, second, newest = stock(1, 3)
    stock(2, 3)

    result = svc.create_delivery({"orderId": order.order_id, "deliveryDate": "2025-03-02T09:00:00"})

    assert result.refunds == ()
    assert result.delivery.status == DeliveryStatus.DELIVERED
    assert result.delivery.ongkir_plan == 15000
    assert len(result.delivery.items) == 5
    assert inventory.get_by_barcode(first.barcode).status == InventoryStatus.SOLD
    assert inventory.get_by_barcode(second.barcode).status == InventoryStatus.SOLD
    assert inventory.get_by_barcode(newest.barcode).status == InventoryStatus.READY


def test_delivery_without_date_is_pending(svc, order_service, stock):
    order = _order(order_service, items=[{"productId": 2, "quantity": 1}])
    stock(2, 1)

    result = svc.create_delivery({"orderId": order.order_id})

    assert result.delivery.status == DeliveryStatus.PENDING


def test_shortage_requires_confirmation(svc, order_service, stock, inventory):
    order = _order(order_service)
    stock(1, 1)
    stock(2, 3)

    with pytest.raises(ShortageError) as exc:
        svc.create_delivery({"orderId": order.order_id})

    assert exc.value.status_code == 409
    assert exc.value.payload["code"] == "DELIVERY_REFUND_CONFIRM"
    assert exc.value.shortages == [
        {"productId": 1, "name": "Hokkaido Large", "code": "HOK-L", "requested": 2, "available": 1}
    ]
    assert all(i.status == InventoryStatus.READY for i in inventory.items.values())


def test_force_refund_delivers_available_and_reprices_order(svc, order_service, orders, stock):
    order = _order(order_service, discount=10)
    stock(1, 1)
    stock(2, 3)

    result = svc.create_delivery({"orderId": order.order_id, "forceRefund": True})

    assert [(r.product_id, r.quantity) for r in result.refunds] == [(1, 1)]
    updated = orders.get(order.order_id)
    assert updated.item_for(1).quantity == 1
    # (85000 + 3 * 12000) * 0.9 + 15000 shipping
    assert updated.total_amount == 123900


def test_force_refund_drops_products_with_no_stock(svc, order_service, orders, stock):
    order = _order(order_service)
    stock(2, 3)

    result = svc.create_delivery({"orderId": order.order_id, "forceRefund": True})

    assert [(r.code, r.quantity) for r in result.refunds] == [("HOK-L", 2)]
    assert orders.get(order.order_id).item_for(1) is None


def test_items_not_listed_are_refunded(svc, order_service, orders, stock):
    order = _order(order_service)
    stock(1, 2)
    stock(2, 3)

    result = svc.create_delivery({"orderId": order.order_id, "items": [{"productId": 1, "quantity": 2}]})

    assert [(r.product_id, r.quantity) for r in result.refunds] == [(2, 3)]
    assert [i.product_id for i in orders.get(order.order_id).items] == [1]


def test_nothing_deliverable_is_rejected_even_when_forced(svc, order_service):
    order = _order(order_service)

    with pytest.raises(ValidationError):
        svc.create_delivery({"orderId": order.order_id, "forceRefund": True})


def test_stock_at_other_location_does_not_count(svc, order_service, stock):
    order = _order(order_service, items=[{"productId": 2, "quantity": 1}])
    stock(2, 5, Location.JAKARTA)

    with pytest.raises(ShortageError):
        svc.create_delivery({"orderId": order.order_id})


def test_request_validation(svc, order_service, stock):
    order = _order(order_service)
    stock(1, 5)

    with pytest.raises(NotFoundError):
        svc.create_delivery({"orderId": 999})
    with pytest.raises(ValidationError):
        svc.create_delivery({"orderId": order.order_id, "items": [{"productId": 42, "quantity": 1}]})
    with pytest.raises(ValidationError):
        svc.create_delivery({"orderId": order.order_id, "items": [{"productId": 1, "quantity": 3}]})


def test_second_delivery_for_same_order_conflicts(svc, order_service, stock):
    order = _order(order_service, items=[{"productId": 2, "quantity": 1}])
    stock(2, 2)
    svc.create_delivery({"orderId": order.order_id})

    with pytest.raises(ConflictError):
        svc.create_delivery({"orderId": order.order_id})


def test_cancel_restores_stock_and_reopens_order(svc, order_service, orders, inventory, stock):
    order = _order(order_service, items=[{"productId": 2, "quantity": 2}])
    stock(2, 2)
    result = svc.create_delivery({"orderId": order.order_id, "deliveryDate": "2025-03-02T09:00:00"})

    svc.cancel_delivery(result.delivery.delivery_id)

    assert all(i.status == InventoryStatus.READY for i in inventory.items.values())
    assert not orders.get(order.order_id).has_deliveries


def test_cancel_pending_delivery_is_rejected(svc, order_service, stock):
    order = _order(order_service, items=[{"productId": 2, "quantity": 1}])
    stock(2, 1)
    result = svc.create_delivery({"orderId": order.order_id})

    with pytest.raises(ValidationError):
        svc.cancel_delivery(result.delivery.delivery_id)
