"""Couche service des commandes.
Rôles:
- Commande différée (paiement au retrait): valider, recalculer le total, comparer au total annoncé, persister en 'pending'.
- Lecture des commandes (liste, détail).
Chaque fonction renvoie un Outcome; aucune écriture n'a lieu si une vérification échoue.
"""
from typing import Annotated, Any, Dict
from uuid import UUID
import logging

from pydantic import Field, StrictInt, TypeAdapter, ValidationError

from storefront.catalog import Catalog, HOODIE_CATALOG
from storefront.errors import (
    INTERNAL_ERROR,
    NOT_FOUND,
    PRICE_MISMATCH,
    VALIDATION_ERROR,
    Outcome,
    failure,
    success,
)
from storefront.orders.customer import validate_customer
from storefront.orders.models import PaymentStatus, new_order
from storefront.orders.repository import OrderRepository, OrderStoreError
from storefront.payments.cart import compute_total, validate_cart

logger = logging.getLogger(__name__)

# Entier strict (ni booléen, ni chaîne, ni flottant) et positif
TOTAL_PRICE = TypeAdapter(Annotated[StrictInt, Field(ge=1)])


def submit_deferred_order(
    checkout: Dict[str, Any],
    *,
    orders: OrderRepository,
    catalog: Catalog = HOODIE_CATALOG,
) -> Outcome:
    """Crée une commande « pending » à partir de CheckoutData.
    - checkout: {firstName, lastName, email, phone, items, totalPrice}
    - price_mismatch si le total recalculé diffère du totalPrice annoncé par le client.
    """
    customer = validate_customer(checkout)
    if not customer.ok:
        return customer

    cart = validate_cart(checkout.get("items"), catalog)
    if not cart.ok:
        return cart

    try:
        declared = TOTAL_PRICE.validate_python(checkout.get("totalPrice"))
    except ValidationError:
        return failure(VALIDATION_ERROR, "Total price must be a positive integer", field="totalPrice", reason="invalid_total")

    calculated = compute_total(cart.value, catalog)
    if calculated != declared:
        logger.warning(
            "orders.deferred price_mismatch declared=%s calculated=%s email=%s",
            declared, calculated, customer.value.email,
        )
        return failure(
            PRICE_MISMATCH,
            "Price mismatch. Please refresh and try again.",
            declared=declared,
            calculated=calculated,
        )

    order = new_order(customer.value, cart.value, calculated, PaymentStatus.PENDING)
    try:
        created = orders.create(order)
    except OrderStoreError as e:
        return failure(INTERNAL_ERROR, f"Could not persist order: {e}")
    logger.info("orders.deferred created order_id=%s total=%s", created.id, created.total_price)
    return success(created)


def list_orders(*, orders: OrderRepository) -> Outcome:
    try:
        return success(orders.list_orders())
    except OrderStoreError as e:
        return failure(INTERNAL_ERROR, f"Could not list orders: {e}")


def get_order(order_id: str, *, orders: OrderRepository) -> Outcome:
    """Détail d'une commande. Un identifiant qui n'est pas un UUID est traité comme introuvable."""
    order_id = (order_id or "").strip()
    if not order_id:
        return failure(VALIDATION_ERROR, "Order id is required", field="id", reason="required")
    try:
        UUID(order_id)
    except ValueError:
        return failure(NOT_FOUND, "Order not found", id=order_id)
    try:
        order = orders.get_order(order_id)
    except OrderStoreError as e:
        return failure(INTERNAL_ERROR, f"Could not read order: {e}")
    if order is None:
        return failure(NOT_FOUND, "Order not found", id=order_id)
    return success(order)
