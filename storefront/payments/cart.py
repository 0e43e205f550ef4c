"""
Logique panier pure (pas de Stripe, pas de DB).
- compute_total: prix faisant foi, calculé depuis le catalogue uniquement.
- CartItem / validate_cart: ligne brute validée par pydantic contre le Catalog passé en contexte,
  première erreur remontée.
- serialize_cart / parse_cart: encodage JSON utilisé par la metadata Stripe et la table orders.
"""
import json
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Sequence, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    StrictInt,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from storefront.catalog import Catalog, HOODIE_CATALOG
from storefront.errors import Outcome, VALIDATION_ERROR, failure, first_violation, success

# module storefront.payments.cart

@dataclass(frozen=True)
class CartLine:
    color: str
    size: str
    quantity: int
    unit_price: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "size": self.size,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
        }


def compute_total(cart: Sequence[CartLine], catalog: Catalog = HOODIE_CATALOG) -> int:
    """
    Total faisant foi (unités monétaires entières).
    Le prix unitaire vient du catalogue, jamais de la ligne de panier.
    """
    return sum(line.quantity * catalog.unit_price for line in cart)


def to_minor_units(total: int) -> int:
    # Stripe attend des centimes
    return total * 100


def _catalog(info: ValidationInfo) -> Catalog:
    return (info.context or {}).get("catalog", HOODIE_CATALOG)


class CartItem(BaseModel):
    """Ligne de panier envoyée par le client. unitPrice accepte l'alias pricePerUnit."""

    color: str
    size: str
    quantity: StrictInt
    unit_price: float = Field(strict=True, validation_alias=AliasChoices("unitPrice", "pricePerUnit"))

    @field_validator("color")
    @classmethod
    def known_color(cls, v: str, info: ValidationInfo) -> str:
        if v not in _catalog(info).color_values:
            raise PydanticCustomError("unknown_color", "Unknown color: '{color}'", {"color": v})
        return v

    @field_validator("size")
    @classmethod
    def known_size(cls, v: str, info: ValidationInfo) -> str:
        if v not in _catalog(info).size_values:
            raise PydanticCustomError("unknown_size", "Unknown size: '{size}'", {"size": v})
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_in_range(cls, v: int, info: ValidationInfo) -> int:
        catalog = _catalog(info)
        if not catalog.min_quantity <= v <= catalog.max_quantity:
            raise PydanticCustomError(
                "quantity_out_of_range",
                "Quantity must be between {min} and {max}",
                {"min": catalog.min_quantity, "max": catalog.max_quantity},
            )
        return v

    @field_validator("unit_price")
    @classmethod
    def current_unit_price(cls, v: float, info: ValidationInfo) -> float:
        if v != _catalog(info).unit_price:
            raise PydanticCustomError("stale_unit_price", "Unit price does not match the current price")
        return v


CART_ADAPTER = TypeAdapter(Annotated[List[CartItem], Field(min_length=1)])

CART_REASONS = {"unknown_color", "unknown_size", "quantity_out_of_range", "stale_unit_price"}
# Erreurs de type pydantic (str attendu, entier strict, champ absent) ramenées au motif du champ
DEFAULT_REASONS = {
    "color": ("unknown_color", "Unknown color"),
    "size": ("unknown_size", "Unknown size"),
    "quantity": ("invalid_quantity", "Quantity must be an integer"),
    "unitPrice": ("stale_unit_price", "Unit price does not match the current price"),
}
CANONICAL_FIELDS = {"pricePerUnit": "unitPrice", "unit_price": "unitPrice"}


def _describe(err: Dict[str, Any]) -> Tuple[str, str, str]:
    loc = err["loc"]
    if not loc:
        if err["type"] == "too_short":
            return "items", "empty_cart", "Cart cannot be empty"
        return "items", "not_a_list", "Cart must be a list of items"
    prefix = f"items[{loc[0]}]"
    if len(loc) == 1:
        return prefix, "not_an_object", "Cart item must be an object"
    name = CANONICAL_FIELDS.get(str(loc[1]), str(loc[1]))
    if err["type"] in CART_REASONS:
        return f"{prefix}.{name}", err["type"], err["msg"]
    reason, message = DEFAULT_REASONS.get(name, ("invalid_item", err["msg"]))
    return f"{prefix}.{name}", reason, message


def validate_cart(raw: Any, catalog: Catalog = HOODIE_CATALOG) -> Outcome:
    """
    Valide un panier brut [{color, size, quantity, unitPrice}, ...].
    - Renvoie success(list[CartLine]) ou la première violation rencontrée
      (validation_error avec field + reason), sans réparation partielle.
    - unitPrice doit correspondre au prix catalogue courant (pricePerUnit accepté en alias).
    """
    try:
        items = CART_ADAPTER.validate_python(raw, context={"catalog": catalog})
    except ValidationError as exc:
        return first_violation(exc, _describe)
    return success([
        CartLine(color=i.color, size=i.size, quantity=i.quantity, unit_price=catalog.unit_price)
        for i in items
    ])


def serialize_cart(cart: Sequence[CartLine]) -> str:
    """Sérialise le panier en JSON compact (ordre des lignes conservé)."""
    return json.dumps([line.to_dict() for line in cart], separators=(",", ":"))


def parse_cart(text: str, catalog: Catalog = HOODIE_CATALOG) -> Outcome:
    """
    Reconstruit un panier depuis sa forme JSON puis le revalide.
    - JSON illisible: validation_error (field="items", reason="malformed_json").
    """
    try:
        raw = json.loads(text or "")
    except ValueError:
        return failure(VALIDATION_ERROR, "Cart is not valid JSON", field="items", reason="malformed_json")
    return validate_cart(raw, catalog)
