"""
Dépendances FastAPI partagées par les vues.
- get_order_repository: Supabase ou mémoire selon ORDER_BACKEND.
- get_intent_store: PaymentIntents Stripe.
- get_catalog: catalogue du produit.
Les tests remplacent ces fonctions via app.dependency_overrides.
"""
from typing import Optional

from storefront.catalog import Catalog, HOODIE_CATALOG
from storefront.config import ORDER_BACKEND
from storefront.orders.repository import InMemoryOrderRepository, OrderRepository, SupabaseOrderRepository
from storefront.payments.intent_store import IntentStore
from storefront.payments.stripe_client import StripeIntentStore

_memory_orders: Optional[InMemoryOrderRepository] = None

def get_order_repository() -> OrderRepository:
    global _memory_orders
    if ORDER_BACKEND == "memory":
        if _memory_orders is None:
            _memory_orders = InMemoryOrderRepository()
        return _memory_orders
    return SupabaseOrderRepository()

def get_intent_store() -> IntentStore:
    return StripeIntentStore()

def get_catalog() -> Catalog:
    return HOODIE_CATALOG
