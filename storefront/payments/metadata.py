"""
Sérialisation/désérialisation des métadonnées Stripe (coordonnées client, items).

Stripe limite chaque valeur de metadata à 500 caractères: le JSON du panier est
découpé en morceaux "items", "items_1", "items_2", ... et recollé dans l'ordre
à la lecture.
"""
from typing import Any, Dict, Mapping, Sequence, Tuple

from storefront.payments.cart import CartLine, serialize_cart

# module storefront.payments.metadata
METADATA_VALUE_LIMIT = 500
ITEMS_KEY = "items"
CUSTOMER_KEYS = ("firstName", "lastName", "email", "phone")


def _items_key(index: int) -> str:
    return ITEMS_KEY if index == 0 else f"{ITEMS_KEY}_{index}"


def make_metadata(customer: Any, cart: Sequence[CartLine]) -> Dict[str, str]:
    """
    Construit la metadata du PaymentIntent.
    - customer: CustomerInfo validé (first_name, last_name, email, phone).
    - cart: panier validé, sérialisé en JSON puis découpé si nécessaire.
    """
    meta = {
        "firstName": customer.first_name,
        "lastName": customer.last_name,
        "email": customer.email,
        "phone": customer.phone,
    }
    items_json = serialize_cart(cart)
    chunks = [items_json[i:i + METADATA_VALUE_LIMIT] for i in range(0, len(items_json), METADATA_VALUE_LIMIT)]
    for idx, chunk in enumerate(chunks):
        meta[_items_key(idx)] = chunk
    return meta


def extract_items(metadata: Mapping[str, str]) -> str:
    """Recolle le JSON du panier (chaîne vide si absent)."""
    parts = []
    idx = 0
    while _items_key(idx) in metadata:
        parts.append(metadata[_items_key(idx)])
        idx += 1
    return "".join(parts)


def extract_order_metadata(metadata: Mapping[str, str]) -> Tuple[Dict[str, Any], str]:
    """
    Extrait (coordonnées brutes, JSON des items) depuis la metadata d'une autorisation.
    Les coordonnées restent brutes: la validation est faite par l'appelant.
    """
    customer = {key: metadata.get(key) for key in CUSTOMER_KEYS}
    return customer, extract_items(metadata)
