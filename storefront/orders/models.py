"""
Modèles des commandes.
- Order: valeur immuable persistée (colonnes snake_case, JSON camelCase côté API).
- CustomerInfo: coordonnées du client validées par pydantic (EmailStr, téléphone).
- new_order: construit une commande à partir d'un panier déjà validé et de son total.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Sequence
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront.payments.cart import CartLine, serialize_cart
from storefront.utils.validators import validate_phone_digits

# module storefront.orders.models


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class CustomerInfo(BaseModel):
    """Coordonnées du client (clés camelCase côté API, espaces retirés)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel, str_strip_whitespace=True)

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: str

    @field_validator("phone")
    @classmethod
    def phone_has_enough_digits(cls, v: str) -> str:
        return validate_phone_digits(v)


class Order(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    items: str  # JSON du panier
    total_price: int
    payment_intent_id: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime

    def to_row(self) -> Dict[str, Any]:
        """Ligne de la table orders (noms de colonnes snake_case)."""
        return self.model_dump(mode="json")

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Order":
        return cls.model_validate(row)


def new_order(
    customer: CustomerInfo,
    cart: Sequence[CartLine],
    total_price: int,
    payment_status: PaymentStatus,
    payment_intent_id: Optional[str] = None,
) -> Order:
    return Order(
        id=str(uuid4()),
        first_name=customer.first_name,
        last_name=customer.last_name,
        email=customer.email,
        phone=customer.phone,
        items=serialize_cart(cart),
        total_price=total_price,
        payment_intent_id=payment_intent_id,
        payment_status=payment_status,
        created_at=datetime.now(timezone.utc),
    )
