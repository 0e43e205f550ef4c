from pathlib import Path
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from storefront.orders.models import CustomerInfo, PaymentStatus, new_order
from storefront.orders.repository import (
    DuplicateOrderError,
    InMemoryOrderRepository,
    OrderStoreError,
    SupabaseOrderRepository,
)
from storefront.payments.cart import CartLine

CUSTOMER = CustomerInfo(first_name="Ada", last_name="Lovelace", email="ada@example.com", phone="5551234567")
CART = [CartLine(color="black", size="large", quantity=2, unit_price=65)]


def _order(intent_id=None):
    return new_order(CUSTOMER, CART, 130, PaymentStatus.PAID if intent_id else PaymentStatus.PENDING, payment_intent_id=intent_id)


@pytest.fixture()
def supabase(monkeypatch):
    client = MagicMock()
    # Lecture préalable par payment_intent_id: aucune commande existante par défaut
    client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = MagicMock(data=[])
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)
    return client


def test_supabase_create_inserts_snake_case_row(supabase):
    order = _order("pi_1")
    table = supabase.table.return_value
    table.insert.return_value.execute.return_value = MagicMock(data=[order.to_row()])

    created = SupabaseOrderRepository().create(order)

    supabase.table.assert_called_with("orders")
    row = table.insert.call_args[0][0]
    assert row["payment_intent_id"] == "pi_1"
    assert row["total_price"] == 130
    assert row["payment_status"] == "paid"
    assert created == order


def test_supabase_unique_violation_is_duplicate(supabase):
    table = supabase.table.return_value
    table.insert.return_value.execute.side_effect = APIError({"code": "23505", "message": "duplicate key value"})

    with pytest.raises(DuplicateOrderError) as exc:
        SupabaseOrderRepository().create(_order("pi_1"))
    assert exc.value.payment_intent_id == "pi_1"


def test_supabase_other_api_error_is_store_error(supabase):
    table = supabase.table.return_value
    table.insert.return_value.execute.side_effect = APIError({"code": "42501", "message": "permission denied"})

    with pytest.raises(OrderStoreError) as exc:
        SupabaseOrderRepository().create(_order())
    assert not isinstance(exc.value, DuplicateOrderError)


def test_supabase_get_by_payment_intent(supabase):
    order = _order("pi_9")
    select = supabase.table.return_value.select.return_value
    select.eq.return_value.limit.return_value.execute.return_value = MagicMock(data=[order.to_row()])

    found = SupabaseOrderRepository().get_order_by_payment_intent("pi_9")

    select.eq.assert_called_with("payment_intent_id", "pi_9")
    assert found == order


def test_supabase_get_order_missing(supabase):
    select = supabase.table.return_value.select.return_value
    select.eq.return_value.limit.return_value.execute.return_value = MagicMock(data=[])
    assert SupabaseOrderRepository().get_order("x") is None


def test_supabase_list_orders_newest_first(supabase):
    select = supabase.table.return_value.select.return_value
    select.order.return_value.execute.return_value = MagicMock(data=[_order().to_row()])

    orders = SupabaseOrderRepository().list_orders()

    select.order.assert_called_with("created_at", desc=True)
    assert len(orders) == 1


def test_supabase_network_error_is_store_error(supabase):
    supabase.table.return_value.select.return_value.order.return_value.execute.side_effect = ConnectionError("down")
    with pytest.raises(OrderStoreError):
        SupabaseOrderRepository().list_orders()


def test_memory_repository_unique_payment_intent():
    repo = InMemoryOrderRepository()
    first = repo.create(_order("pi_1"))
    with pytest.raises(DuplicateOrderError):
        repo.create(_order("pi_1"))
    assert repo.get_order_by_payment_intent("pi_1") == first
    assert len(repo.list_orders()) == 1


def test_memory_repository_pending_orders_have_no_intent_constraint():
    repo = InMemoryOrderRepository()
    repo.create(_order())
    repo.create(_order())
    assert len(repo.list_orders()) == 2


def test_order_api_shape_is_camel_case():
    data = _order("pi_1").to_api()
    assert set(data) == {
        "id", "firstName", "lastName", "email", "phone", "items",
        "totalPrice", "paymentIntentId", "paymentStatus", "createdAt",
    }


def test_supabase_existing_payment_intent_skips_insert(supabase):
    existing = _order("pi_1")
    select = supabase.table.return_value.select.return_value
    select.eq.return_value.limit.return_value.execute.return_value = MagicMock(data=[existing.to_row()])

    with pytest.raises(DuplicateOrderError):
        SupabaseOrderRepository().create(_order("pi_1"))

    select.eq.assert_called_with("payment_intent_id", "pi_1")
    supabase.table.return_value.insert.assert_not_called()


def test_supabase_pending_order_skips_intent_lookup(supabase):
    order = _order()
    table = supabase.table.return_value
    table.insert.return_value.execute.return_value = MagicMock(data=[order.to_row()])

    SupabaseOrderRepository().create(order)

    table.select.assert_not_called()


def test_orders_schema_declares_unique_payment_intent():
    ddl = (Path(__file__).resolve().parents[2] / "supabase" / "orders.sql").read_text(encoding="utf-8").lower()
    assert "create table if not exists public.orders" in ddl
    assert "create unique index" in ddl
    assert "(payment_intent_id)" in ddl
    assert "where payment_intent_id is not null" in ddl
