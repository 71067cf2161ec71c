# storefront_catalog/filters/product_validator.py

"""Last check before products leave a strategy."""

import logging
from urllib.parse import urlsplit

from storefront_catalog.filters.normalizer import on_storefront
from storefront_catalog.models.product import Product

logger = logging.getLogger("storefront_catalog.filters")


class ProductValidator:
    """Enforce the output invariants: a title and a storefront URL."""

    @staticmethod
    def reject_reason(product: Product) -> str | None:
        """Why *product* cannot be emitted, or ``None`` if it can."""
        if not product.title.strip():
            return "empty title"
        parts = urlsplit(product.url)
        if parts.scheme not in ("http", "https"):
            return "non-absolute URL"
        if not on_storefront(product.url):
            return "URL outside the storefront"
        return None

    @classmethod
    def validate(
        cls, products: list[Product],
    ) -> tuple[list[Product], int]:
        """Split off invalid products; returns survivors and drop count."""
        valid: list[Product] = []
        for product in products:
            reason = cls.reject_reason(product)
            if reason is None:
                valid.append(product)
            else:
                logger.debug("Rejected %r: %s", product.url, reason)

        dropped = len(products) - len(valid)
        if dropped:
            logger.info("Validation dropped %d products", dropped)
        return valid, dropped
