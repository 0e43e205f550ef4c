"""
Accès aux données pour la feature 'orders'.
- OrderRepository: contrat minimal (create, list_orders, get_order, get_order_by_payment_intent).
- SupabaseOrderRepository: table orders via le client service-role.
- InMemoryOrderRepository: même contrat, pour le dev local et les tests.
Contrainte d'unicité sur payment_intent_id: un doublon lève DuplicateOrderError.
"""
from typing import Dict, List, Optional, Protocol
import logging
import threading

from postgrest.exceptions import APIError

import storefront.infra.supabase_client as supabase_client
from storefront.config import ORDERS_TABLE
from storefront.orders.models import Order

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

# module storefront.orders.repository
class OrderStoreError(Exception):
    """Échec du stockage (réseau, droits, schéma)."""


class DuplicateOrderError(OrderStoreError):
    def __init__(self, payment_intent_id: Optional[str]):
        super().__init__(f"Order already exists for payment intent {payment_intent_id}")
        self.payment_intent_id = payment_intent_id


class OrderRepository(Protocol):
    def create(self, order: Order) -> Order: ...
    def list_orders(self) -> List[Order]: ...
    def get_order(self, order_id: str) -> Optional[Order]: ...
    def get_order_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]: ...


class InMemoryOrderRepository:
    def __init__(self):
        self._orders: Dict[str, Order] = {}
        self._by_intent: Dict[str, str] = {}
        self._lock = threading.Lock()

    def create(self, order: Order) -> Order:
        with self._lock:
            intent_id = order.payment_intent_id
            if intent_id and intent_id in self._by_intent:
                raise DuplicateOrderError(intent_id)
            self._orders[order.id] = order
            if intent_id:
                self._by_intent[intent_id] = order.id
        return order

    def list_orders(self) -> List[Order]:
        with self._lock:
            orders = list(self._orders.values())
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def get_order_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]:
        order_id = self._by_intent.get(payment_intent_id)
        return self._orders.get(order_id) if order_id else None


class SupabaseOrderRepository:
    def __init__(self, table: str = ORDERS_TABLE):
        self.table = table

    def _table(self):
        return supabase_client.get_service_supabase().table(self.table)

    def create(self, order: Order) -> Order:
        """
        Insère la commande et renvoie la ligne persistée.
        - Commande déjà présente pour ce payment_intent_id -> DuplicateOrderError (lecture préalable).
        - Violation d'unicité 23505 (index de supabase/orders.sql, insertions concurrentes) -> DuplicateOrderError.
        - Toute autre erreur est journalisée puis remontée en OrderStoreError.
        """
        if order.payment_intent_id and self.get_order_by_payment_intent(order.payment_intent_id) is not None:
            raise DuplicateOrderError(order.payment_intent_id)
        try:
            res = self._table().insert(order.to_row()).execute()
        except APIError as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise DuplicateOrderError(order.payment_intent_id) from e
            logger.exception("orders.repository.create failed order_id=%s", order.id)
            raise OrderStoreError(str(e)) from e
        except Exception as e:
            logger.exception("orders.repository.create failed order_id=%s", order.id)
            raise OrderStoreError(str(e)) from e
        rows = res.data or []
        return Order.from_row(rows[0]) if rows else order

    def list_orders(self) -> List[Order]:
        try:
            res = self._table().select("*").order("created_at", desc=True).execute()
        except Exception as e:
            logger.exception("orders.repository.list_orders failed")
            raise OrderStoreError(str(e)) from e
        return [Order.from_row(row) for row in res.data or []]

    def _get_one(self, column: str, value: str) -> Optional[Order]:
        try:
            res = self._table().select("*").eq(column, value).limit(1).execute()
        except Exception as e:
            logger.exception("orders.repository.get failed %s=%s", column, value)
            raise OrderStoreError(str(e)) from e
        rows = res.data or []
        return Order.from_row(rows[0]) if rows else None

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._get_one("id", order_id)

    def get_order_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]:
        return self._get_one("payment_intent_id", payment_intent_id)
