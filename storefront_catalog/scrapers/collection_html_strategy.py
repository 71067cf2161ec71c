# storefront_catalog/scrapers/collection_html_strategy.py

"""Last-resort strategy scanning collection listing pages for product links."""

import asyncio

from storefront_catalog.filters.normalizer import handle_from_url
from storefront_catalog.models.product import RawProduct
from storefront_catalog.parsers.markup import MarkupParser
from storefront_catalog.scrapers.base_strategy import CatalogStrategy
from storefront_catalog.scrapers.fetch_client import Deadline, HttpClient


class CollectionHtmlStrategy(CatalogStrategy):
    """Loose anchor scan of the ``/collections/all`` listing pages.

    Permissive by nature and the most prone to false positives; only
    reached once every structured strategy has come back empty. A
    failed first page fails the strategy, the second page is optional.
    """

    def __init__(
        self,
        client: HttpClient,
        parser: MarkupParser,
        name: str = "collection_html",
        deadline_seconds: float | None = None,
    ) -> None:
        super().__init__(name, client, deadline_seconds)
        self.parser = parser

    def _page_urls(self) -> list[str]:
        return [
            self.settings.storefront_url(path)
            for path in self.settings.COLLECTION_PAGE_PATHS
        ]

    def _candidates(self, page: str) -> list[RawProduct]:
        records: list[RawProduct] = []
        anchors = self.parser.product_anchors(
            page, self.settings.PRODUCT_PATH_SEGMENT
        )
        for anchor in anchors:
            if not anchor.title:
                continue
            handle = handle_from_url(anchor.href)
            url = (
                f"{self.settings.PRODUCT_PATH_SEGMENT}{handle}"
                if handle
                else anchor.href
            )
            records.append(
                RawProduct(
                    id=handle,
                    title=anchor.title,
                    url=url,
                    image=anchor.image,
                    handle=handle,
                )
            )
        return records

    def _scan(self, deadline: Deadline) -> list[RawProduct]:
        limit = self.settings.HTML_MAX_PRODUCTS
        first, *rest = self._page_urls()
        records: list[RawProduct] = []
        seen: set[str] = set()

        # Cards often link the same product twice (image and title)
        def keep(candidates: list[RawProduct]) -> None:
            for record in candidates:
                key = record.handle or record.url or ""
                if key in seen or len(records) >= limit:
                    continue
                seen.add(key)
                records.append(record)

        keep(self._candidates(self._fetch_text(first, deadline)))
        for url in rest:
            if len(records) >= limit:
                break
            page = self._try_fetch_text(url, deadline)
            if page is None:
                break
            keep(self._candidates(page))
        return records

    async def _collect(self, deadline: Deadline) -> list[RawProduct]:
        return await asyncio.to_thread(self._scan, deadline)
