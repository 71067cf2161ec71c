# storefront_catalog/filters/deduplicator.py

"""Collapse normalized products to unique canonical URLs."""

import logging
from urllib.parse import urlsplit

from storefront_catalog.models.product import Product

logger = logging.getLogger("storefront_catalog.filters")


class ProductDeduplicator:
    """First-seen deduplication keyed on the product page location."""

    @staticmethod
    def url_key(url: str) -> str:
        """Host plus path, lowercased, without query, fragment or slash.

        ``/products/tank?variant=1`` and ``/products/tank/`` are the
        same page for catalog purposes.
        """
        if not url:
            return ""
        try:
            parts = urlsplit(url.strip())
        except ValueError:
            return url.strip().lower()
        return f"{parts.netloc}{parts.path.rstrip('/')}".lower()

    @classmethod
    def deduplicate(
        cls, products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop every product whose URL key was already seen.

        Order of the survivors is the input order. Returns the kept
        products and how many were removed.
        """
        kept: dict[str, Product] = {}
        for product in products:
            key = cls.url_key(product.url)
            if key in kept:
                logger.debug(
                    "Duplicate %s (first seen as '%s')",
                    product.url,
                    kept[key].title,
                )
                continue
            kept[key] = product

        removed = len(products) - len(kept)
        if removed:
            logger.info("Deduplication removed %d products", removed)
        return list(kept.values()), removed
