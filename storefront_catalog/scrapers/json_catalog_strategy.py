# storefront_catalog/scrapers/json_catalog_strategy.py

"""Catalog strategy reading a storefront ``products.json`` endpoint."""

import asyncio

from storefront_catalog.models.product import RawProduct
from storefront_catalog.parsers.json_catalog import parse_catalog_json
from storefront_catalog.scrapers.base_strategy import (
    CatalogStrategy,
    StrategyFailed,
)
from storefront_catalog.scrapers.fetch_client import (
    Deadline,
    FetchFailure,
    HttpClient,
)


class JsonCatalogStrategy(CatalogStrategy):
    """Fetch one JSON catalog endpoint and parse its product array.

    The storefront answers blocked or retired JSON endpoints with an
    HTML page and a 200, so a declared non-JSON content type counts
    as failure.
    """

    def __init__(
        self,
        name: str,
        client: HttpClient,
        endpoint: str,
        deadline_seconds: float | None = None,
    ) -> None:
        super().__init__(name, client, deadline_seconds)
        self.endpoint = endpoint

    def _fetch_catalog(self, deadline: Deadline) -> list[RawProduct]:
        result = self.client.fetch(
            self.endpoint,
            accept=self.settings.JSON_ACCEPT,
            deadline=deadline,
        )
        if isinstance(result, FetchFailure):
            raise StrategyFailed(result.reason)
        if not result.ok:
            raise StrategyFailed(f"HTTP {result.status}")
        content_type = result.content_type.lower()
        if content_type and "json" not in content_type:
            raise StrategyFailed(
                f"unexpected content type '{result.content_type}'"
            )
        if self._looks_blocked(result.body):
            raise StrategyFailed("blocked response")
        return parse_catalog_json(
            result.body, self.settings.JSON_MAX_ENTRIES,
        )

    async def _collect(self, deadline: Deadline) -> list[RawProduct]:
        return await asyncio.to_thread(self._fetch_catalog, deadline)
