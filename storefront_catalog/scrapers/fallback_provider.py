# storefront_catalog/scrapers/fallback_provider.py

"""Bundled static catalog used when every live strategy fails."""

import json
import logging
from pathlib import Path
from typing import Any, cast

from storefront_catalog.config.settings import Settings
from storefront_catalog.filters.deduplicator import ProductDeduplicator
from storefront_catalog.filters.normalizer import normalize_all
from storefront_catalog.models.product import Product, RawProduct

logger = logging.getLogger("storefront_catalog.fallback")


class FallbackProvider:
    """Serve the bundled dataset through the same normalizer.

    Records are shaped ``{id, name, price, images, handle}``. A
    missing or malformed file logs an error and yields an empty
    list; this provider never raises.
    """

    name = "fallback"

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.FALLBACK_PATH

    def _load_records(self) -> list[dict[str, Any]]:
        """Load the raw dataset from disk."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data: Any = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(
                "Fallback dataset unreadable (%s): %s",
                self.path,
                exc,
                exc_info=True,
            )
            return []
        if not isinstance(data, list):
            logger.error(
                "Fallback dataset %s is not a list", self.path,
            )
            return []
        return [
            cast(dict[str, Any], r)
            for r in cast(list[Any], data)
            if isinstance(r, dict)
        ]

    @staticmethod
    def _to_raw(record: dict[str, Any]) -> RawProduct:
        images = record.get("images")
        image = (
            cast(list[Any], images)[0]
            if isinstance(images, list) and images
            else None
        )
        handle = record.get("handle")
        return RawProduct(
            id=str(record["id"]) if record.get("id") is not None else None,
            title=record.get("name"),
            url=record.get("url"),
            image=image if isinstance(image, str) else None,
            price=record.get("price"),
            handle=handle if isinstance(handle, str) else None,
        )

    def products(self) -> list[Product]:
        """Return the normalized, deduplicated bundled catalog."""
        raws = [self._to_raw(r) for r in self._load_records()]
        products, dropped = normalize_all(raws)
        products, _ = ProductDeduplicator.deduplicate(products)
        if dropped:
            logger.warning(
                "Fallback dataset had %d records without a name",
                dropped,
            )
        return products
