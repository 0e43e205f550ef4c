"""
Module 'payments' (feature-first): point d'entrée public.
Réunit logique panier (prix, validation, sérialisation) et metadata Stripe.
Le client Stripe, les services et les vues s'importent depuis leurs sous-modules.
"""

from .cart import CartLine, compute_total, to_minor_units, validate_cart, serialize_cart, parse_cart
from .metadata import make_metadata, extract_items, extract_order_metadata

__all__ = [
    # cart
    "CartLine",
    "compute_total",
    "to_minor_units",
    "validate_cart",
    "serialize_cart",
    "parse_cart",
    # metadata
    "make_metadata",
    "extract_items",
    "extract_order_metadata",
]
