import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from storefront.errors import INTERNAL_ERROR, NOT_FOUND, PRICE_MISMATCH, VALIDATION_ERROR
from storefront.orders import service as orders_service
from storefront.orders.models import CustomerInfo, PaymentStatus, new_order
from storefront.orders.repository import OrderStoreError
from storefront.payments.cart import validate_cart


@pytest.fixture()
def checkout(customer_info, make_item):
    def _build(items, total):
        return dict(customer_info, items=items, totalPrice=total)
    return _build


class _BrokenRepository:
    def create(self, order):
        raise OrderStoreError("connection reset")

    def list_orders(self):
        raise OrderStoreError("connection reset")

    def get_order(self, order_id):
        raise OrderStoreError("connection reset")


def test_deferred_order_created_pending(checkout, make_item, orders_repo):
    out = orders_service.submit_deferred_order(checkout([make_item(quantity=3)], 195), orders=orders_repo)

    assert out.ok
    order = out.value
    assert order.total_price == 195
    assert order.payment_status == PaymentStatus.PENDING
    assert order.payment_intent_id is None
    assert json.loads(order.items) == [{"color": "black", "size": "large", "quantity": 3, "unitPrice": 65}]
    assert orders_repo.get_order(order.id) == order


def test_deferred_order_price_mismatch_writes_nothing(checkout, make_item, orders_repo):
    out = orders_service.submit_deferred_order(checkout([make_item(quantity=5)], 300), orders=orders_repo)

    assert out.status == PRICE_MISMATCH
    assert out.error.message == "Price mismatch. Please refresh and try again."
    assert out.error.details == {"declared": 300, "calculated": 325}
    assert orders_repo.list_orders() == []


@pytest.mark.parametrize("total", ["195", 0, True, None, 195.0])
def test_deferred_order_total_must_be_positive_integer(checkout, make_item, orders_repo, total):
    out = orders_service.submit_deferred_order(checkout([make_item(quantity=3)], total), orders=orders_repo)
    assert out.status == VALIDATION_ERROR
    assert out.error.details["reason"] == "invalid_total"


def test_deferred_order_invalid_cart_checked_before_total(checkout, make_item, orders_repo):
    out = orders_service.submit_deferred_order(checkout([make_item(quantity=11)], 715), orders=orders_repo)
    assert out.error.details["reason"] == "quantity_out_of_range"
    assert orders_repo.list_orders() == []


@pytest.mark.parametrize("qty,total", [(0, 0), (0, 65)])
def test_deferred_order_zero_quantity_rejected(checkout, make_item, orders_repo, qty, total):
    out = orders_service.submit_deferred_order(checkout([make_item(quantity=qty)], total), orders=orders_repo)
    assert out.status == VALIDATION_ERROR
    assert out.error.details == {"field": "items[0].quantity", "reason": "quantity_out_of_range"}
    assert orders_repo.list_orders() == []


def test_deferred_order_invalid_customer(checkout, make_item, orders_repo):
    data = checkout([make_item()], 65)
    data["email"] = "nope"
    out = orders_service.submit_deferred_order(data, orders=orders_repo)
    assert out.error.details["field"] == "email"


def test_deferred_order_store_failure(checkout, make_item):
    out = orders_service.submit_deferred_order(checkout([make_item()], 65), orders=_BrokenRepository())
    assert out.status == INTERNAL_ERROR
    assert out.error.to_dict() == {"kind": INTERNAL_ERROR, "message": "Internal server error"}


def _stored_order(repo, minutes_ago):
    customer = CustomerInfo(first_name="Ada", last_name="Lovelace", email="ada@example.com", phone="5551234567")
    cart = validate_cart([{"color": "red", "size": "xl", "quantity": 1, "unitPrice": 65}]).value
    order = new_order(customer, cart, 65, PaymentStatus.PENDING)
    order = order.model_copy(update={"created_at": datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)})
    return repo.create(order)


def test_list_orders_newest_first(orders_repo):
    older = _stored_order(orders_repo, minutes_ago=10)
    newer = _stored_order(orders_repo, minutes_ago=1)
    out = orders_service.list_orders(orders=orders_repo)
    assert [o.id for o in out.value] == [newer.id, older.id]


def test_list_orders_store_failure():
    assert orders_service.list_orders(orders=_BrokenRepository()).status == INTERNAL_ERROR


def test_get_order(orders_repo):
    order = _stored_order(orders_repo, minutes_ago=0)
    assert orders_service.get_order(order.id, orders=orders_repo).value == order


@pytest.mark.parametrize("order_id", ["not-a-uuid", str(uuid4())])
def test_get_order_not_found(orders_repo, order_id):
    out = orders_service.get_order(order_id, orders=orders_repo)
    assert out.status == NOT_FOUND


def test_get_order_blank_id(orders_repo):
    assert orders_service.get_order("  ", orders=orders_repo).status == VALIDATION_ERROR
