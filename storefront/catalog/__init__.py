"""
Catalogue du produit unique (sweat à capuche).
- Valeur immuable passée aux fonctions de prix et de validation.
- Les tests peuvent substituer un autre Catalog sans toucher à l'état global.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class Option:
    value: str
    name: str
    hex: Optional[str] = None


@dataclass(frozen=True)
class Catalog:
    unit_price: int
    currency: str
    colors: Tuple[Option, ...]
    sizes: Tuple[Option, ...]
    min_quantity: int = 1
    max_quantity: int = 10
    color_values: FrozenSet[str] = field(init=False, repr=False)
    size_values: FrozenSet[str] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "color_values", frozenset(c.value for c in self.colors))
        object.__setattr__(self, "size_values", frozenset(s.value for s in self.sizes))

    def to_dict(self) -> dict:
        return {
            "unitPrice": self.unit_price,
            "currency": self.currency,
            "minQuantity": self.min_quantity,
            "maxQuantity": self.max_quantity,
            "colors": [{"value": c.value, "name": c.name, "hex": c.hex} for c in self.colors],
            "sizes": [{"value": s.value, "name": s.name} for s in self.sizes],
        }


HOODIE_CATALOG = Catalog(
    unit_price=65,
    currency="usd",
    colors=(
        Option("black", "Black", "#1a1a1a"),
        Option("red", "Red", "#c41e3a"),
        Option("navy-blue", "Navy Blue", "#1e3a5f"),
        Option("dark-grey", "Dark Grey", "#404040"),
        Option("sapphire-blue", "Sapphire Blue", "#0f52ba"),
        Option("purple", "Purple", "#5d3a6a"),
    ),
    sizes=(
        Option("youth-medium", "Youth Medium"),
        Option("youth-large", "Youth Large"),
        Option("medium", "Medium"),
        Option("large", "Large"),
        Option("xl", "XL"),
        Option("xxl", "XXL"),
        Option("xxxl", "XXXL"),
    ),
)
