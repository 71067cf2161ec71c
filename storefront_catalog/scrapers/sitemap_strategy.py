# storefront_catalog/scrapers/sitemap_strategy.py

"""Catalog strategy walking the sitemap and reading product ld+json."""

import asyncio

from storefront_catalog.config.settings import Settings
from storefront_catalog.models.product import RawProduct
from storefront_catalog.parsers.markup import MarkupParser
from storefront_catalog.parsers.structured_data import product_from_blocks
from storefront_catalog.scrapers.base_strategy import (
    CatalogStrategy,
    StrategyFailed,
)
from storefront_catalog.scrapers.fetch_client import Deadline, HttpClient


class SitemapStrategy(CatalogStrategy):
    """Recover the catalog when the JSON endpoints are blocked.

    1. Discovery: read the sitemap index and keep the product
       sub-sitemaps (first ``SITEMAP_MAX_SUBSITEMAPS``), falling back
       to the conventional ``sitemap_products_1.xml``.
    2. Enumeration: collect product-page URLs from those sub-sitemaps,
       up to ``SITEMAP_MAX_URLS``.
    3. Extraction: fetch up to ``SITEMAP_MAX_PAGES`` pages through a
       pool of ``SITEMAP_CONCURRENCY`` workers and read the embedded
       schema.org ``Product`` block of each.

    The whole run shares one deadline; pages not fetched in time are
    skipped and an overrun fails the strategy.
    """

    def __init__(
        self,
        client: HttpClient,
        parser: MarkupParser,
        name: str = "sitemap",
        deadline_seconds: float | None = None,
        concurrency: int | None = None,
    ) -> None:
        super().__init__(
            name,
            client,
            deadline_seconds
            if deadline_seconds is not None
            else Settings.SITEMAP_DEADLINE,
        )
        self.parser = parser
        self.concurrency: int = max(
            1,
            concurrency
            if concurrency is not None
            else self.settings.SITEMAP_CONCURRENCY,
        )

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def _discover_subsitemaps(self, deadline: Deadline) -> list[str]:
        """Return the product sub-sitemaps listed in the sitemap index."""
        index_url = self.settings.storefront_url(
            self.settings.SITEMAP_INDEX_PATH
        )
        found: list[str] = []
        body = self._try_fetch_text(index_url, deadline)
        if body is not None:
            marker = self.settings.PRODUCT_SITEMAP_MARKER
            for loc in self.parser.sitemap_locations(body):
                if marker in loc and loc not in found:
                    found.append(loc)

        if not found:
            default = self.settings.storefront_url(
                self.settings.DEFAULT_PRODUCT_SITEMAP_PATH
            )
            self.logger.info(
                "[%s] No product sub-sitemaps in index, using %s",
                self.name,
                default,
            )
            return [default]
        return found[: self.settings.SITEMAP_MAX_SUBSITEMAPS]

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def _enumerate_product_urls(
        self, sitemaps: list[str], deadline: Deadline,
    ) -> list[str]:
        """Collect product-page URLs across the sub-sitemaps."""
        segment = self.settings.PRODUCT_PATH_SEGMENT
        limit = self.settings.SITEMAP_MAX_URLS
        urls: list[str] = []
        seen: set[str] = set()

        for sitemap_url in sitemaps:
            body = self._try_fetch_text(sitemap_url, deadline)
            if body is None:
                continue
            for loc in self.parser.sitemap_locations(body):
                if segment not in loc or loc in seen:
                    continue
                seen.add(loc)
                urls.append(loc)
                if len(urls) >= limit:
                    return urls
        return urls

    def _enumerate(self, deadline: Deadline) -> list[str]:
        sitemaps = self._discover_subsitemaps(deadline)
        urls = self._enumerate_product_urls(sitemaps, deadline)
        if not urls:
            raise StrategyFailed(
                f"no product URLs in {len(sitemaps)} sub-sitemap(s)"
            )
        self.logger.info(
            "[%s] %d product URLs from %d sub-sitemap(s)",
            self.name,
            len(urls),
            len(sitemaps),
        )
        return urls

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def _extract_page(
        self, url: str, deadline: Deadline,
    ) -> RawProduct | None:
        """Fetch one product page and read its Product block."""
        body = self._try_fetch_text(url, deadline)
        if body is None:
            return None
        blocks = self.parser.structured_data_blocks(body)
        record = product_from_blocks(url, blocks)
        if record is None:
            self.logger.debug(
                "[%s] No Product block on %s", self.name, url,
            )
        return record

    async def _collect(self, deadline: Deadline) -> list[RawProduct]:
        urls = await asyncio.to_thread(self._enumerate, deadline)
        pages = urls[: self.settings.SITEMAP_MAX_PAGES]
        semaphore = asyncio.Semaphore(self.concurrency)

        async def visit(url: str) -> RawProduct | None:
            async with semaphore:
                if deadline.expired:
                    return None
                return await asyncio.to_thread(
                    self._extract_page, url, deadline,
                )

        results = await asyncio.gather(
            *(visit(u) for u in pages), return_exceptions=True
        )
        if deadline.expired:
            raise asyncio.TimeoutError()

        records: list[RawProduct] = []
        for url, result in zip(pages, results):
            if isinstance(result, RawProduct):
                records.append(result)
            elif isinstance(result, Exception):
                self.logger.error(
                    "[%s] Page extraction error for %s: %s",
                    self.name,
                    url,
                    result,
                    exc_info=result,
                )
        return records
