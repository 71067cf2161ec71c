# storefront_catalog/filters/normalizer.py

"""Map raw candidate records onto the canonical Product shape.

Every function here is pure and total: bad input yields ``None``
(or a safe default), never an exception.
"""

import logging
import math
from urllib.parse import urlsplit

from storefront_catalog.config.settings import Settings
from storefront_catalog.models.product import Product, RawProduct

logger = logging.getLogger("storefront_catalog.filters")


def _is_absolute_http(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def on_storefront(url: str) -> bool:
    """True when *url*'s host is the storefront domain or a subdomain."""
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return False
    domain = Settings.STOREFRONT_DOMAIN.lower()
    return host == domain or host.endswith(f".{domain}")


def normalize_price(value: object) -> float | None:
    """Coerce a raw price into major currency units.

    Integer-like values above ``Settings.CENTS_THRESHOLD`` are taken
    to be cents. This misreads whole-dollar prices above the
    threshold; it mirrors what the storefront feeds have been
    observed to send and is kept deliberately.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "").lstrip("$")
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number) or number <= 0:
        return None
    if number > Settings.CENTS_THRESHOLD and number.is_integer():
        return round(number / 100, 2)
    return number


def normalize_image_url(value: object) -> str | None:
    """Return an absolute image URL or ``None``.

    ``//host/p`` gains ``https:``, ``/p`` gains the storefront
    origin, anything else must already be an absolute http(s) URL.
    """
    if not isinstance(value, str):
        return None
    src = value.strip()
    if not src:
        return None
    if src.startswith("//"):
        candidate = f"https:{src}"
        return candidate if _is_absolute_http(candidate) else None
    if src.startswith("/"):
        return f"{Settings.STOREFRONT_BASE_URL}{src}"
    return src if _is_absolute_http(src) else None


def handle_from_url(url: str | None) -> str | None:
    """Extract the slug following the product path segment."""
    if not url:
        return None
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    segment = Settings.PRODUCT_PATH_SEGMENT
    if segment not in path:
        return None
    handle = path.split(segment, 1)[1].strip("/").split("/")[0]
    return handle or None


def normalize_product_url(
    value: object, handle: str | None = None,
) -> str:
    """Return an absolute URL on the storefront domain.

    Relative paths resolve against the storefront origin. Missing,
    unparsable or foreign-host URLs are rebuilt from *handle*, or
    fall back to the storefront root.
    """
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.startswith("//"):
            raw = f"https:{raw}"
        elif raw.startswith("/"):
            raw = f"{Settings.STOREFRONT_BASE_URL}{raw}"
        if _is_absolute_http(raw) and on_storefront(raw):
            return raw
    if handle:
        return Settings.storefront_url(
            f"{Settings.PRODUCT_PATH_SEGMENT}{handle}"
        )
    return f"{Settings.STOREFRONT_BASE_URL}/"


def _clean_text(value: object) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split())


def normalize_product(raw: RawProduct) -> Product | None:
    """Build a canonical Product, or ``None`` when the title is missing."""
    title = _clean_text(raw.title)
    if not title:
        logger.debug("Dropped candidate without title (url=%s)", raw.url)
        return None

    handle = _clean_text(raw.handle) or handle_from_url(raw.url)
    url = normalize_product_url(raw.url, handle)
    identifier = _clean_text(raw.id) or handle or title

    return Product(
        id=identifier,
        title=title,
        url=url,
        image=normalize_image_url(raw.image),
        price=normalize_price(raw.price),
        handle=handle or None,
    )


def normalize_all(
    raws: list[RawProduct],
) -> tuple[list[Product], int]:
    """Normalize a batch; returns products and the count dropped."""
    products: list[Product] = []
    dropped = 0
    for raw in raws:
        product = normalize_product(raw)
        if product is None:
            dropped += 1
            continue
        products.append(product)
    return products, dropped
