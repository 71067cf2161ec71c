# storefront_catalog/parsers/structured_data.py

"""Extraction of schema.org ``Product`` nodes from ld+json blocks."""

import json
import logging
from collections.abc import Iterator
from typing import Any, cast

from storefront_catalog.filters.normalizer import handle_from_url
from storefront_catalog.models.product import RawProduct

logger = logging.getLogger("storefront_catalog.parsers")


def _is_product_type(node: dict[str, Any]) -> bool:
    declared = node.get("@type")
    if isinstance(declared, str):
        return declared == "Product"
    if isinstance(declared, list):
        return "Product" in cast(list[Any], declared)
    return False


def _walk(data: Any) -> Iterator[dict[str, Any]]:
    """Yield candidate nodes from top-level arrays and ``@graph`` lists."""
    if isinstance(data, list):
        for item in cast(list[Any], data):
            yield from _walk(item)
    elif isinstance(data, dict):
        node = cast(dict[str, Any], data)
        yield node
        graph = node.get("@graph")
        if isinstance(graph, list):
            yield from _walk(graph)


def find_product_node(blocks: list[str]) -> dict[str, Any] | None:
    """Return the first ``Product`` node across the given JSON blocks.

    Undecodable blocks are skipped.
    """
    for block in blocks:
        try:
            data: Any = json.loads(block)
        except (json.JSONDecodeError, TypeError):
            logger.debug("Skipping undecodable ld+json block")
            continue
        for node in _walk(data):
            if _is_product_type(node):
                return node
    return None


def _image_of(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value:
        return _image_of(cast(list[Any], value)[0])
    if isinstance(value, dict):
        url = cast(dict[str, Any], value).get("url")
        return url if isinstance(url, str) else None
    return None


def _offer_price(offers: Any) -> Any:
    if isinstance(offers, list):
        for offer in cast(list[Any], offers):
            price = _offer_price(offer)
            if price is not None:
                return price
        return None
    if isinstance(offers, dict):
        offer = cast(dict[str, Any], offers)
        for key in ("price", "lowPrice"):
            value = offer.get(key)
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                return value
    return None


def product_from_blocks(
    page_url: str, blocks: list[str],
) -> RawProduct | None:
    """Build a raw record for *page_url* from its ld+json blocks."""
    node = find_product_node(blocks)
    if node is None:
        return None
    name = node.get("name")
    return RawProduct(
        id=page_url,
        title=name if isinstance(name, str) else None,
        url=page_url,
        image=_image_of(node.get("image")),
        price=_offer_price(node.get("offers")),
        handle=handle_from_url(page_url),
    )
