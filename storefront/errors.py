"""
Résultats typés des cas d'usage (commandes, paiements).

Les services ne lèvent pas d'exception pour les refus attendus: ils renvoient
un Outcome(status, value, error) où status vaut "ok", "already_confirmed" ou
l'un des types d'erreur ci-dessous. Les vues traduisent le type en code HTTP.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from fastapi import HTTPException
from pydantic import ValidationError

OK = "ok"
ALREADY_CONFIRMED = "already_confirmed"

VALIDATION_ERROR = "validation_error"
PRICE_MISMATCH = "price_mismatch"
AMOUNT_MISMATCH = "amount_mismatch"
PAYMENT_INCOMPLETE = "payment_incomplete"
PROCESSOR_ERROR = "processor_error"
NOT_FOUND = "not_found"
INTERNAL_ERROR = "internal_error"

STATUS_BY_KIND: Dict[str, int] = {
    VALIDATION_ERROR: 400,
    PRICE_MISMATCH: 400,
    AMOUNT_MISMATCH: 400,
    PAYMENT_INCOMPLETE: 400,
    PROCESSOR_ERROR: 400,
    NOT_FOUND: 404,
    INTERNAL_ERROR: 500,
}

INTERNAL_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class OrderError:
    kind: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        # Le message interne n'est jamais renvoyé au client
        message = INTERNAL_MESSAGE if self.kind == INTERNAL_ERROR else self.message
        body: Dict[str, Any] = {"kind": self.kind, "message": message}
        if self.kind != INTERNAL_ERROR:
            body.update(self.details)
        return body


class Outcome(NamedTuple):
    status: str
    value: Any = None
    error: Optional[OrderError] = None

    @property
    def ok(self) -> bool:
        return self.status in (OK, ALREADY_CONFIRMED)


def success(value: Any, status: str = OK) -> Outcome:
    return Outcome(status, value, None)


def failure(kind: str, message: str, **details: Any) -> Outcome:
    return Outcome(kind, None, OrderError(kind, message, details))


def http_error(error: OrderError) -> HTTPException:
    """Construit l'HTTPException correspondant à une erreur de cas d'usage."""
    return HTTPException(status_code=STATUS_BY_KIND.get(error.kind, 500), detail=error.to_dict())


def first_violation(exc: ValidationError, describe: Callable[[Dict[str, Any]], Tuple[str, str, str]]) -> Outcome:
    """
    Traduit la première erreur pydantic en validation_error {field, reason}.
    - describe(err) -> (field, reason, message) propre à chaque modèle.
    - Les erreurs sont listées dans l'ordre des champs: seule la première est remontée.
    """
    field_name, reason, message = describe(exc.errors(include_url=False)[0])
    return failure(VALIDATION_ERROR, message, field=field_name, reason=reason)
