"""
Stockage des autorisations de paiement (PaymentIntent).
- IntentStore: contrat create/retrieve utilisé par l'émetteur et le vérificateur.
- La metadata d'une autorisation est figée à la création: seul le statut évolue.
- InMemoryIntentStore: implémentation en mémoire (append-only) pour les tests et le dev.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Protocol
from uuid import uuid4
import threading

# module storefront.payments.intent_store
SUCCEEDED = "succeeded"


class IntentNotFoundError(Exception):
    def __init__(self, authorization_id: str):
        super().__init__(f"No such payment intent: {authorization_id}")
        self.authorization_id = authorization_id


class ProcessorError(Exception):
    """Erreur côté processeur de paiement (réseau, requête invalide, refus)."""


@dataclass(frozen=True)
class PaymentAuthorization:
    id: str
    amount: int  # centimes
    currency: str
    status: str
    metadata: Dict[str, str] = field(default_factory=dict)
    client_secret: Optional[str] = None


class IntentStore(Protocol):
    def create(self, *, amount: int, currency: str, metadata: Dict[str, str]) -> PaymentAuthorization: ...
    def retrieve(self, authorization_id: str) -> PaymentAuthorization: ...


class InMemoryIntentStore:
    def __init__(self):
        self._intents: Dict[str, PaymentAuthorization] = {}
        self._lock = threading.Lock()

    def create(self, *, amount: int, currency: str, metadata: Dict[str, str]) -> PaymentAuthorization:
        intent_id = f"pi_{uuid4().hex[:24]}"
        auth = PaymentAuthorization(
            id=intent_id,
            amount=amount,
            currency=currency,
            status="requires_payment_method",
            metadata=dict(metadata),
            client_secret=f"{intent_id}_secret_{uuid4().hex[:16]}",
        )
        with self._lock:
            self._intents[intent_id] = auth
        return auth

    def retrieve(self, authorization_id: str) -> PaymentAuthorization:
        auth = self._intents.get(authorization_id)
        if auth is None:
            raise IntentNotFoundError(authorization_id)
        # La metadata renvoyée est une copie: celle du store reste figée
        return replace(auth, metadata=dict(auth.metadata))

    def set_status(self, authorization_id: str, status: str) -> None:
        """Simule la transition de statut pilotée par le processeur."""
        with self._lock:
            auth = self._intents.get(authorization_id)
            if auth is None:
                raise IntentNotFoundError(authorization_id)
            self._intents[authorization_id] = replace(auth, status=status)
