import os

# Avant l'import de l'app: pas de Redis, commandes en mémoire
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("ORDER_BACKEND", "memory")

import pytest
from typing import Any, Callable, Dict, Generator
from fastapi.testclient import TestClient

from storefront.app import app as fastapi_app
from storefront.deps import get_intent_store, get_order_repository
from storefront.orders.repository import InMemoryOrderRepository
from storefront.payments.intent_store import InMemoryIntentStore

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def orders_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()

@pytest.fixture()
def intents() -> InMemoryIntentStore:
    return InMemoryIntentStore()

@pytest.fixture()
def client(app, orders_repo, intents) -> Generator[TestClient, None, None]:
    """Client API branché sur des stockages en mémoire (ni Stripe ni Supabase)."""
    app.dependency_overrides[get_order_repository] = lambda: orders_repo
    app.dependency_overrides[get_intent_store] = lambda: intents
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()

@pytest.fixture()
def customer_info() -> Dict[str, str]:
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phone": "(555) 123-4567",
    }

@pytest.fixture()
def make_item() -> Callable[..., Dict[str, Any]]:
    def _make(color: str = "black", size: str = "large", quantity: int = 1, unit_price: Any = 65) -> Dict[str, Any]:
        return {"color": color, "size": size, "quantity": quantity, "unitPrice": unit_price}
    return _make
