# tests/canned_client.py

"""In-memory HttpClient serving canned responses for strategy tests."""

import threading

from storefront_catalog.scrapers.fetch_client import (
    Deadline,
    FetchFailure,
    FetchResponse,
    FetchResult,
)


class CannedHttpClient:
    """Map URLs to canned (status, body, content_type) answers.

    Unknown URLs fail like an unreachable host. Every requested URL
    is recorded in ``requested`` (thread-safe).
    """

    def __init__(
        self,
        routes: dict[str, tuple[int, str, str]] | None = None,
    ) -> None:
        self.routes: dict[str, tuple[int, str, str]] = dict(routes or {})
        self.requested: list[str] = []
        self._lock = threading.Lock()

    def add(
        self,
        url: str,
        body: str,
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> None:
        self.routes[url] = (status, body, content_type)

    def fetch(
        self,
        url: str,
        *,
        accept: str | None = None,
        deadline: Deadline | None = None,
    ) -> FetchResult:
        with self._lock:
            self.requested.append(url)
        if deadline is not None and deadline.expired:
            return FetchFailure(url=url, reason="deadline exceeded")
        if url not in self.routes:
            return FetchFailure(url=url, reason="connection refused")
        status, body, content_type = self.routes[url]
        return FetchResponse(
            url=url, status=status, body=body, content_type=content_type,
        )

    def requested_matching(self, fragment: str) -> list[str]:
        return [u for u in self.requested if fragment in u]
