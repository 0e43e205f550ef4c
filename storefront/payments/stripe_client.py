"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
StripeIntentStore implémente IntentStore sur les PaymentIntents (la metadata
du PaymentIntent porte les coordonnées client et le panier sérialisé).
"""
from typing import Any, Dict
import logging

import stripe

from storefront.config import STRIPE_SECRET_KEY, STRIPE_API_VERSION, STRIPE_MAX_NETWORK_RETRIES
from storefront.payments.intent_store import IntentNotFoundError, PaymentAuthorization, ProcessorError

logger = logging.getLogger(__name__)

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY.
    - Sans clé, lève RuntimeError (erreur de configuration -> 500).
    """
    if not STRIPE_SECRET_KEY:
        raise RuntimeError("STRIPE_SECRET_KEY manquant")
    stripe.api_key = STRIPE_SECRET_KEY
    stripe.max_network_retries = STRIPE_MAX_NETWORK_RETRIES
    if STRIPE_API_VERSION:
        stripe.api_version = STRIPE_API_VERSION
    return stripe

def _to_authorization(intent: Any) -> PaymentAuthorization:
    # stripe retourne un StripeObject; to_dict() le convertit récursivement
    data: Dict[str, Any] = intent.to_dict()
    metadata = data.get("metadata") or {}
    return PaymentAuthorization(
        id=data["id"],
        amount=int(data.get("amount") or 0),
        currency=data.get("currency") or "",
        status=data.get("status") or "",
        metadata={str(k): str(v) for k, v in metadata.items()},
        client_secret=data.get("client_secret"),
    )

def _message(e: stripe.StripeError) -> str:
    return e.user_message or str(e) or "Payment processor error"

class StripeIntentStore:
    def create(self, *, amount: int, currency: str, metadata: Dict[str, str]) -> PaymentAuthorization:
        """
        Crée un PaymentIntent Stripe.
        - amount en centimes, moyens de paiement automatiques activés.
        - metadata: coordonnées client + items (JSON du panier).
        """
        require_stripe()
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error("stripe.payment_intent.create failed amount=%s error=%s", amount, e)
            raise ProcessorError(_message(e)) from e
        return _to_authorization(intent)

    def retrieve(self, authorization_id: str) -> PaymentAuthorization:
        """
        Relit un PaymentIntent par son identifiant.
        - Identifiant inconnu (resource_missing) -> IntentNotFoundError.
        """
        require_stripe()
        try:
            intent = stripe.PaymentIntent.retrieve(authorization_id)
        except stripe.InvalidRequestError as e:
            if e.code == "resource_missing":
                raise IntentNotFoundError(authorization_id) from e
            logger.error("stripe.payment_intent.retrieve failed id=%s error=%s", authorization_id, e)
            raise ProcessorError(_message(e)) from e
        except stripe.StripeError as e:
            logger.error("stripe.payment_intent.retrieve failed id=%s error=%s", authorization_id, e)
            raise ProcessorError(_message(e)) from e
        return _to_authorization(intent)
