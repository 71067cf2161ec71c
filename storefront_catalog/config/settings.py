# storefront_catalog/config/settings.py

"""Central configuration for the storefront catalog pipeline."""

import os
from pathlib import Path
from urllib.parse import urlsplit

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront catalog pipeline."""

    # --- Storefront ---
    STOREFRONT_BASE_URL: str = os.getenv(
        "STOREFRONT_BASE_URL", "https://www.rippedcityinc.com"
    ).rstrip("/")
    STOREFRONT_DOMAIN: str = (
        urlsplit(STOREFRONT_BASE_URL).hostname or ""
    ).removeprefix("www.")
    PRODUCT_PATH_SEGMENT: str = "/products/"

    # --- Endpoints (relative to STOREFRONT_BASE_URL) ---
    PRIMARY_JSON_PATH: str = "/products.json?limit=250"
    SECONDARY_JSON_PATH: str = (
        "/collections/all/products.json?limit=250"
    )
    SITEMAP_INDEX_PATH: str = "/sitemap.xml"
    DEFAULT_PRODUCT_SITEMAP_PATH: str = "/sitemap_products_1.xml"
    PRODUCT_SITEMAP_MARKER: str = "sitemap_products"
    COLLECTION_PAGE_PATHS: list[str] = [
        "/collections/all",
        "/collections/all?page=2",
    ]

    # --- Caps ---
    JSON_MAX_ENTRIES: int = 250         # Entries read from a JSON catalog
    SITEMAP_MAX_SUBSITEMAPS: int = 3    # Product sub-sitemaps visited
    SITEMAP_MAX_URLS: int = 120         # Product URLs collected
    SITEMAP_MAX_PAGES: int = 100        # Product pages fetched
    HTML_MAX_PRODUCTS: int = 60         # Anchors kept from listing pages

    # --- Price heuristic ---
    CENTS_THRESHOLD: float = 1000.0     # Integer-like prices above are cents

    # --- Network ---
    REQUEST_TIMEOUT: float = 15.0       # Seconds before a request times out
    SITEMAP_CONCURRENCY: int = 8        # Concurrent product-page fetches
    STRATEGY_DEADLINE: float = 30.0     # Wall-clock budget per strategy
    SITEMAP_DEADLINE: float = 45.0      # Wall-clock budget for the sitemap
    HEALTH_SLOW_MS: float = 5000.0      # Probe latency reported as slow

    # --- Parsing ---
    MARKUP_PARSER: str = os.getenv("MARKUP_PARSER", "soup")
    AVAILABLE_PARSERS: list[str] = ["soup", "regex"]

    # --- Identity ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    USER_AGENT: str = os.getenv(
        "STOREFRONT_USER_AGENT", "Rip360-Mobile-App/1.0"
    )
    JSON_ACCEPT: str = "application/json, text/plain, */*"
    HTML_ACCEPT: str = (
        "text/html,application/xhtml+xml,"
        "application/xml;q=0.9,*/*;q=0.8"
    )
    NO_CACHE_HEADERS: dict[str, str] = {
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }

    # --- Blocked response detection ---
    CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]
    FULL_PAGE_MIN_CHARS: int = 5000     # Larger pages with a <body> are real

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    FALLBACK_PATH: Path = (
        BASE_DIR / "storefront_catalog" / "config"
        / "fallback_products.json"
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    @classmethod
    def storefront_url(cls, path: str) -> str:
        """Join a root-relative *path* onto the storefront origin."""
        return f"{cls.STOREFRONT_BASE_URL}{path}"
