# storefront_catalog/parsers/json_catalog.py

"""Parser for storefront ``products.json`` catalog documents."""

import json
from typing import Any, cast

from storefront_catalog.config.settings import Settings
from storefront_catalog.models.product import RawProduct
from storefront_catalog.parsers.errors import ParseError

_URL_FIELDS: tuple[str, ...] = ("url", "online_store_url")


def _locate_entries(data: Any) -> list[Any]:
    """Find the product array in ``{products: [...]}`` or a bare list."""
    if isinstance(data, dict):
        products = cast(dict[str, Any], data).get("products")
        if isinstance(products, list):
            return cast(list[Any], products)
    elif isinstance(data, list):
        return cast(list[Any], data)
    raise ParseError("no product array in JSON document")


def _src_of(value: Any) -> str | None:
    """Read an image reference given as a string or ``{src: ...}``."""
    if isinstance(value, str) and value.strip():
        return value
    if isinstance(value, dict):
        src = cast(dict[str, Any], value).get("src")
        if isinstance(src, str) and src.strip():
            return src
    return None


def _extract_image(entry: dict[str, Any]) -> str | None:
    image = _src_of(entry.get("image"))
    if image:
        return image
    images = entry.get("images")
    if isinstance(images, list) and images:
        image = _src_of(cast(list[Any], images)[0])
        if image:
            return image
    return _src_of(entry.get("featured_image"))


def _extract_price(entry: dict[str, Any]) -> Any:
    for key in ("price", "price_min"):
        value = entry.get(key)
        if value is not None and not isinstance(value, (dict, list)):
            return value
    variants = entry.get("variants")
    if isinstance(variants, list) and variants:
        first = cast(list[Any], variants)[0]
        if isinstance(first, dict):
            return cast(dict[str, Any], first).get("price")
    return None


def _extract_url(entry: dict[str, Any], handle: str | None) -> str:
    if handle:
        return f"{Settings.PRODUCT_PATH_SEGMENT}{handle}"
    for key in _URL_FIELDS:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return f"{Settings.STOREFRONT_BASE_URL}/"


def _optional_str(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def parse_entry(entry: dict[str, Any]) -> RawProduct:
    """Map a single catalog entry onto a raw candidate record."""
    handle = _optional_str(entry.get("handle"))
    return RawProduct(
        id=_optional_str(entry.get("id")),
        title=_optional_str(entry.get("title")),
        url=_extract_url(entry, handle),
        image=_extract_image(entry),
        price=_extract_price(entry),
        handle=handle,
    )


def parse_catalog_json(
    body: str, max_entries: int | None = None,
) -> list[RawProduct]:
    """Parse a catalog body into raw candidates.

    Raises:
        ParseError: the body is not JSON or holds no product array.
    """
    try:
        data: Any = json.loads(body)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ParseError(f"invalid JSON: {exc}") from exc

    limit = (
        max_entries
        if max_entries is not None
        else Settings.JSON_MAX_ENTRIES
    )
    entries = _locate_entries(data)[:limit]
    return [
        parse_entry(cast(dict[str, Any], entry))
        for entry in entries
        if isinstance(entry, dict)
    ]
