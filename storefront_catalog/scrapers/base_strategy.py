# storefront_catalog/scrapers/base_strategy.py

"""Abstract base class for every rung of the catalog strategy ladder."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod

from storefront_catalog.config.settings import Settings
from storefront_catalog.filters.deduplicator import ProductDeduplicator
from storefront_catalog.filters.normalizer import normalize_all
from storefront_catalog.filters.product_validator import ProductValidator
from storefront_catalog.models.outcome import StrategyOutcome
from storefront_catalog.models.product import RawProduct
from storefront_catalog.parsers.errors import ParseError
from storefront_catalog.scrapers.fetch_client import (
    Deadline,
    FetchFailure,
    HttpClient,
)


class StrategyFailed(Exception):
    """Raised inside a strategy to abandon it with a reason."""


class CatalogStrategy(ABC):
    """One acquisition method, turned into a typed outcome by :meth:`run`.

    Subclasses implement :meth:`_collect`, returning raw candidates or
    raising :class:`StrategyFailed` / :class:`ParseError`. Whatever
    happens, :meth:`run` resolves to a :class:`StrategyOutcome`.
    """

    def __init__(
        self,
        name: str,
        client: HttpClient,
        deadline_seconds: float | None = None,
    ) -> None:
        self.name = name
        self.client = client
        self.logger = logging.getLogger(
            f"storefront_catalog.{name}"
        )
        self.settings = Settings()
        self.deadline_seconds: float = (
            deadline_seconds
            if deadline_seconds is not None
            else self.settings.STRATEGY_DEADLINE
        )

    def _looks_blocked(self, body: str) -> bool:
        """Check for Cloudflare challenge pages and CAPTCHA indicators.

        Only short bodies are scanned. Full pages are
        never rejected: Cloudflare injects its challenge-platform script
        into ordinary storefront pages too.
        """
        if body.lstrip().startswith(("{", "[")):
            return False
        lower = body.lower()
        if "<body" in lower and len(body) > self.settings.FULL_PAGE_MIN_CHARS:
            return False

        for marker in self.settings.CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Challenge page detected (marker: '%s')",
                    self.name,
                    marker,
                )
                return True
        for keyword in self.settings.CAPTCHA_KEYWORDS:
            if keyword in lower:
                self.logger.warning(
                    "[%s] CAPTCHA keyword '%s' detected",
                    self.name,
                    keyword,
                )
                return True
        return False

    def _fetch_text(
        self,
        url: str,
        deadline: Deadline,
        accept: str | None = None,
    ) -> str:
        """Fetch *url* and return its body, or raise StrategyFailed."""
        result = self.client.fetch(
            url, accept=accept, deadline=deadline,
        )
        if isinstance(result, FetchFailure):
            raise StrategyFailed(f"{url}: {result.reason}")
        if not result.ok:
            raise StrategyFailed(f"{url}: HTTP {result.status}")
        if self._looks_blocked(result.body):
            raise StrategyFailed(f"{url}: blocked response")
        return result.body

    def _try_fetch_text(
        self,
        url: str,
        deadline: Deadline,
        accept: str | None = None,
    ) -> str | None:
        """Like :meth:`_fetch_text` but ``None`` instead of raising."""
        try:
            return self._fetch_text(url, deadline, accept)
        except StrategyFailed as exc:
            self.logger.debug("[%s] %s", self.name, exc)
            return None

    @abstractmethod
    async def _collect(self, deadline: Deadline) -> list[RawProduct]:
        """Produce raw candidate records for this strategy."""
        ...

    async def run(self) -> StrategyOutcome:
        """Run the strategy under its deadline; never raises."""
        start = time.monotonic()
        deadline = Deadline(self.deadline_seconds)
        self.logger.info("[%s] Attempting strategy", self.name)

        try:
            raws = await asyncio.wait_for(
                self._collect(deadline),
                timeout=self.deadline_seconds,
            )
        except asyncio.TimeoutError:
            return self._fail(
                f"deadline of {self.deadline_seconds:.0f}s exceeded",
                start,
            )
        except (StrategyFailed, ParseError) as exc:
            return self._fail(str(exc), start)
        except Exception as exc:
            self.logger.error(
                "[%s] Unexpected strategy error: %s",
                self.name,
                exc,
                exc_info=True,
            )
            return self._fail(f"unexpected error: {exc}", start)

        products, dropped = normalize_all(raws)
        products, invalid = ProductValidator.validate(products)
        products, dupes = ProductDeduplicator.deduplicate(products)
        elapsed = time.monotonic() - start

        if not products:
            self.logger.info(
                "[%s] No usable products (%d candidates)",
                self.name,
                len(raws),
            )
            return StrategyOutcome.empty(
                self.name,
                f"no usable products among {len(raws)} candidates",
                elapsed=elapsed,
                invalid_count=dropped + invalid,
            )

        self.logger.info(
            "[%s] %d products in %.2fs",
            self.name,
            len(products),
            elapsed,
        )
        return StrategyOutcome.success(
            self.name,
            products,
            elapsed=elapsed,
            deduplicated_count=dupes,
            invalid_count=dropped + invalid,
        )

    def _fail(self, reason: str, start: float) -> StrategyOutcome:
        self.logger.warning("[%s] Strategy failed: %s", self.name, reason)
        return StrategyOutcome.failure(
            self.name, reason, elapsed=time.monotonic() - start,
        )
