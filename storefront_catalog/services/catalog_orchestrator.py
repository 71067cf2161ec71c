# storefront_catalog/services/catalog_orchestrator.py

"""Runs the catalog strategy ladder and guarantees a product list."""

import logging

from storefront_catalog.config.settings import Settings
from storefront_catalog.models.outcome import CatalogResult, StrategyOutcome
from storefront_catalog.models.product import Product
from storefront_catalog.parsers.markup import MarkupParser, get_markup_parser
from storefront_catalog.scrapers.base_strategy import CatalogStrategy
from storefront_catalog.scrapers.collection_html_strategy import (
    CollectionHtmlStrategy,
)
from storefront_catalog.scrapers.fallback_provider import FallbackProvider
from storefront_catalog.scrapers.fetch_client import FetchClient, HttpClient
from storefront_catalog.scrapers.json_catalog_strategy import (
    JsonCatalogStrategy,
)
from storefront_catalog.scrapers.sitemap_strategy import SitemapStrategy

logger = logging.getLogger("storefront_catalog.orchestrator")


def build_ladder(
    client: HttpClient, parser: MarkupParser,
) -> list[CatalogStrategy]:
    """The live strategies in priority order."""
    return [
        JsonCatalogStrategy(
            "primary_json",
            client,
            Settings.storefront_url(Settings.PRIMARY_JSON_PATH),
        ),
        JsonCatalogStrategy(
            "secondary_json",
            client,
            Settings.storefront_url(Settings.SECONDARY_JSON_PATH),
        ),
        SitemapStrategy(client, parser),
        CollectionHtmlStrategy(client, parser),
    ]


class CatalogOrchestrator:
    """Tries each strategy once, in order, and stops at the first success.

    Partial results are never combined across strategies. When no
    live strategy yields a product the bundled fallback is served.
    """

    def __init__(
        self,
        client: HttpClient | None = None,
        parser: MarkupParser | None = None,
        fallback: FallbackProvider | None = None,
        strategies: list[CatalogStrategy] | None = None,
    ) -> None:
        self.client: HttpClient = client or FetchClient()
        self.parser: MarkupParser = parser or get_markup_parser()
        self.fallback = fallback or FallbackProvider()
        self.strategies: list[CatalogStrategy] = (
            strategies
            if strategies is not None
            else build_ladder(self.client, self.parser)
        )

    def _serve_fallback(self, result: CatalogResult) -> CatalogResult:
        result.products = self.fallback.products()
        result.source = FallbackProvider.name
        result.used_fallback = True
        logger.warning(
            "All live strategies failed, serving %d fallback products",
            len(result.products),
        )
        return result

    async def fetch_catalog(self) -> CatalogResult:
        """Run the ladder; never raises."""
        result = CatalogResult()

        for strategy in self.strategies:
            try:
                outcome = await strategy.run()
            except Exception as exc:
                logger.error(
                    "Strategy %s escaped its outcome: %s",
                    strategy.name,
                    exc,
                    exc_info=True,
                )
                outcome = StrategyOutcome.failure(strategy.name, str(exc))

            result.attempts.append(outcome)
            result.invalid_count += outcome.invalid_count
            if outcome.accepted:
                result.products = list(outcome.products)
                result.source = outcome.strategy
                result.deduplicated_count = outcome.deduplicated_count
                logger.info(
                    "Catalog loaded from %s: %d products",
                    outcome.strategy,
                    len(result.products),
                )
                return result

            logger.info(
                "Strategy %s gave no catalog (%s): %s",
                outcome.strategy,
                outcome.kind.name.lower(),
                outcome.reason,
            )

        return self._serve_fallback(result)


async def get_catalog() -> list[Product]:
    """Return the storefront catalog; always a list, never an error."""
    try:
        result = await CatalogOrchestrator().fetch_catalog()
    except Exception as exc:
        logger.error(
            "Catalog pipeline failed outright: %s", exc, exc_info=True,
        )
        return FallbackProvider().products()
    return result.products
