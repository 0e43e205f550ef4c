"""
Cas d'usage 'payments': orchestre panier, metadata, processeur et repository.

Paiement immédiat en deux temps:
1) create_authorization: montant calculé côté serveur, panier figé dans la metadata.
2) confirm_and_persist: relit l'autorisation, franchit les contrôles
   (statut, montant) puis persiste la commande 'paid'.
   AUTHORIZED -> VERIFIED -> PERSISTED, ou REJECTED à n'importe quel contrôle.
"""
from enum import Enum
from typing import Any
import logging

from storefront.catalog import Catalog, HOODIE_CATALOG
from storefront.errors import (
    ALREADY_CONFIRMED,
    AMOUNT_MISMATCH,
    INTERNAL_ERROR,
    NOT_FOUND,
    PAYMENT_INCOMPLETE,
    PROCESSOR_ERROR,
    VALIDATION_ERROR,
    Outcome,
    failure,
    success,
)
from storefront.orders.customer import validate_customer
from storefront.orders.models import PaymentStatus, new_order
from storefront.orders.repository import DuplicateOrderError, OrderRepository, OrderStoreError
from storefront.payments import cart as cart_logic
from storefront.payments import metadata as meta
from storefront.payments.intent_store import (
    SUCCEEDED,
    IntentNotFoundError,
    IntentStore,
    ProcessorError,
)

logger = logging.getLogger(__name__)


class ConfirmationState(str, Enum):
    AUTHORIZED = "authorized"
    VERIFIED = "verified"
    PERSISTED = "persisted"
    REJECTED = "rejected"


def create_authorization(
    items: Any,
    customer_info: Any,
    *,
    intents: IntentStore,
    catalog: Catalog = HOODIE_CATALOG,
) -> Outcome:
    """
    Prépare l'autorisation de paiement pour un panier et un client.
    - Valide le panier puis les coordonnées (validation_error sinon, pas de nouvel essai).
    - Montant = compute_total(panier) * 100 (centimes).
    - Retour: success({"clientSecret", "authorizationId", "amount"}) ou processor_error.
    """
    cart = cart_logic.validate_cart(items, catalog)
    if not cart.ok:
        return cart
    customer = validate_customer(customer_info)
    if not customer.ok:
        return customer

    amount = cart_logic.to_minor_units(cart_logic.compute_total(cart.value, catalog))
    metadata = meta.make_metadata(customer.value, cart.value)
    try:
        auth = intents.create(amount=amount, currency=catalog.currency, metadata=metadata)
    except ProcessorError as e:
        return failure(PROCESSOR_ERROR, str(e))

    logger.info("payments.authorization created id=%s amount=%s", auth.id, auth.amount)
    return success({
        "clientSecret": auth.client_secret,
        "authorizationId": auth.id,
        "amount": auth.amount,
    })


def _reject(authorization_id: str, outcome: Outcome) -> Outcome:
    logger.info(
        "payments.confirm state=%s kind=%s id=%s",
        ConfirmationState.REJECTED.value, outcome.status, authorization_id,
    )
    return outcome


def confirm_and_persist(
    authorization_id: str,
    *,
    intents: IntentStore,
    orders: OrderRepository,
    catalog: Catalog = HOODIE_CATALOG,
) -> Outcome:
    """
    Vérifie une autorisation puis crée la commande payée.
    Le panier provient exclusivement de la metadata de l'autorisation:
    la requête de confirmation ne transporte aucun article.
    Contrôles (aucune écriture si l'un échoue):
      - autorisation inconnue -> not_found
      - statut != succeeded -> payment_incomplete (issue normale, ex: paiement abandonné)
      - panier de la metadata illisible ou montant != total * 100 -> amount_mismatch
    Une seconde confirmation de la même autorisation renvoie la commande existante
    (statut already_confirmed).
    """
    authorization_id = (authorization_id or "").strip() if isinstance(authorization_id, str) else ""
    if not authorization_id:
        return failure(VALIDATION_ERROR, "Payment intent ID is required", field="authorizationId", reason="required")

    try:
        auth = intents.retrieve(authorization_id)
    except IntentNotFoundError:
        return _reject(authorization_id, failure(NOT_FOUND, "Payment intent not found", authorizationId=authorization_id))
    except ProcessorError as e:
        return _reject(authorization_id, failure(PROCESSOR_ERROR, str(e)))

    logger.debug("payments.confirm state=%s id=%s status=%s", ConfirmationState.AUTHORIZED.value, authorization_id, auth.status)

    if auth.status != SUCCEEDED:
        return _reject(authorization_id, failure(
            PAYMENT_INCOMPLETE, "Payment has not been completed", status=auth.status,
        ))

    customer_raw, items_json = meta.extract_order_metadata(auth.metadata)
    cart = cart_logic.parse_cart(items_json, catalog)
    if not cart.ok:
        logger.warning(
            "payments.confirm tamper_signal id=%s reason=%s",
            authorization_id, (cart.error.details or {}).get("reason"),
        )
        return _reject(authorization_id, failure(AMOUNT_MISMATCH, "Payment amount mismatch"))

    calculated = cart_logic.compute_total(cart.value, catalog)
    expected_amount = cart_logic.to_minor_units(calculated)
    if auth.amount != expected_amount:
        logger.warning(
            "payments.confirm tamper_signal id=%s amount=%s expected=%s",
            authorization_id, auth.amount, expected_amount,
        )
        return _reject(authorization_id, failure(AMOUNT_MISMATCH, "Payment amount mismatch"))

    customer = validate_customer(customer_raw)
    if not customer.ok:
        return _reject(authorization_id, customer)

    logger.info("payments.confirm state=%s id=%s", ConfirmationState.VERIFIED.value, authorization_id)

    order = new_order(customer.value, cart.value, calculated, PaymentStatus.PAID, payment_intent_id=authorization_id)
    try:
        created = orders.create(order)
    except DuplicateOrderError:
        try:
            existing = orders.get_order_by_payment_intent(authorization_id)
        except OrderStoreError as e:
            return failure(INTERNAL_ERROR, f"Could not read existing order: {e}")
        if existing is None:
            return failure(INTERNAL_ERROR, f"Duplicate order for {authorization_id} but none found")
        logger.info("payments.confirm already_confirmed id=%s order_id=%s", authorization_id, existing.id)
        return success(existing, status=ALREADY_CONFIRMED)
    except OrderStoreError as e:
        return failure(INTERNAL_ERROR, f"Could not persist order: {e}")

    logger.info(
        "payments.confirm state=%s id=%s order_id=%s total=%s",
        ConfirmationState.PERSISTED.value, authorization_id, created.id, created.total_price,
    )
    return success(created)
