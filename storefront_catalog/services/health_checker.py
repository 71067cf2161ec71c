# storefront_catalog/services/health_checker.py

"""Connectivity probes for the live storefront endpoints."""

import asyncio
import logging
import time
from dataclasses import dataclass

from storefront_catalog.config.settings import Settings
from storefront_catalog.scrapers.fetch_client import (
    FetchClient,
    FetchFailure,
    HttpClient,
)

logger = logging.getLogger("storefront_catalog.health")

_HEALTH_TIMEOUT = 10.0  # seconds per endpoint


@dataclass
class HealthResult:
    """Result of a single endpoint health check."""

    endpoint_id: str
    url: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def storefront_endpoints() -> list[dict[str, str]]:
    """Every endpoint one ladder run may touch first."""
    return [
        {
            "id": "primary_json",
            "url": Settings.storefront_url(Settings.PRIMARY_JSON_PATH),
        },
        {
            "id": "secondary_json",
            "url": Settings.storefront_url(Settings.SECONDARY_JSON_PATH),
        },
        {
            "id": "sitemap",
            "url": Settings.storefront_url(Settings.SITEMAP_INDEX_PATH),
        },
        {
            "id": "collection_html",
            "url": Settings.storefront_url(
                Settings.COLLECTION_PAGE_PATHS[0]
            ),
        },
    ]


def probe_endpoint(
    endpoint: dict[str, str], client: HttpClient,
) -> HealthResult:
    """Probe a single endpoint for reachability and latency."""
    endpoint_id = endpoint["id"]
    url = endpoint["url"]

    start = time.monotonic()
    result = client.fetch(url)
    elapsed_ms = (time.monotonic() - start) * 1000

    if isinstance(result, FetchFailure):
        return HealthResult(
            endpoint_id=endpoint_id,
            url=url,
            status="down",
            latency_ms=elapsed_ms,
            message=result.reason[:80],
        )

    if not result.ok:
        return HealthResult(
            endpoint_id=endpoint_id,
            url=url,
            status="down",
            latency_ms=elapsed_ms,
            message=f"HTTP {result.status}",
        )

    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(
            endpoint_id=endpoint_id,
            url=url,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
        )

    return HealthResult(
        endpoint_id=endpoint_id,
        url=url,
        status="ok",
        latency_ms=elapsed_ms,
        message="",
    )


class HealthChecker:
    """Runs concurrent health probes against all endpoints."""

    def __init__(self, client: HttpClient | None = None) -> None:
        self.client: HttpClient = client or FetchClient(
            timeout=_HEALTH_TIMEOUT
        )
        self.endpoints = storefront_endpoints()

    async def check_all(self) -> list[HealthResult]:
        """Probe every endpoint concurrently."""
        tasks = [
            asyncio.to_thread(probe_endpoint, ep, self.client)
            for ep in self.endpoints
        ]
        results: list[HealthResult] = list(
            await asyncio.gather(*tasks)
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.endpoint_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
