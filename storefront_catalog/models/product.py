# storefront_catalog/models/product.py

"""Product data models for inter-module data flow."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Product:
    """Canonical catalog record, whichever strategy produced it."""

    id: str
    title: str
    url: str
    image: str | None = None
    price: float | None = None
    handle: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "image": self.image,
            "price": self.price,
            "handle": self.handle,
        }


@dataclass
class RawProduct:
    """Unvalidated candidate record emitted by a format parser.

    ``price`` keeps whatever the source sent (number or numeric
    string); the normalizer decides units.
    """

    id: str | None = None
    title: str | None = None
    url: str | None = None
    image: str | None = None
    price: Any = None
    handle: str | None = None
