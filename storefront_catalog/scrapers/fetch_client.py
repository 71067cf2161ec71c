# storefront_catalog/scrapers/fetch_client.py

"""Single-request HTTP client with a fixed storefront identity."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from curl_cffi import requests as curl_requests

from storefront_catalog.config.settings import Settings

logger = logging.getLogger("storefront_catalog.fetch")


class Deadline:
    """Monotonic wall-clock budget shared by every fetch of a strategy."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def clamp(self, timeout: float) -> float:
        """Shrink a per-request *timeout* to fit the remaining budget."""
        return min(timeout, self.remaining())


@dataclass(frozen=True)
class FetchResponse:
    """A completed HTTP exchange, whatever its status."""

    url: str
    status: int
    body: str
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True)
class FetchFailure:
    """Marker for a request that produced no response at all."""

    url: str
    reason: str


FetchResult = FetchResponse | FetchFailure


class HttpClient(Protocol):
    """Anything able to perform a storefront fetch."""

    def fetch(
        self,
        url: str,
        *,
        accept: str | None = None,
        deadline: Deadline | None = None,
    ) -> FetchResult: ...


class FetchClient:
    """GET requests via curl_cffi with no-cache identity headers.

    Never raises: network errors, timeouts and an expired deadline
    all come back as :class:`FetchFailure`. Non-2xx statuses are
    returned as a normal :class:`FetchResponse` and judged by the
    caller. There are no retries here; the strategy ladder moves on
    to the next strategy instead.

    Each worker thread gets its own session, so the sitemap
    strategy's page pool never shares a curl handle.
    """

    def __init__(
        self,
        session_factory: Callable[[], Any] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.settings = Settings()
        self._session_factory = (
            session_factory or self._default_session
        )
        self._timeout: float = (
            timeout
            if timeout is not None
            else self.settings.REQUEST_TIMEOUT
        )
        self._local = threading.local()

    def _default_session(self) -> curl_requests.Session:
        return curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    @property
    def session(self) -> Any:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
        return session

    def identity_headers(
        self, accept: str | None = None,
    ) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "User-Agent": self.settings.USER_AGENT,
            "Accept": accept or self.settings.HTML_ACCEPT,
            "Referer": f"{self.settings.STOREFRONT_BASE_URL}/",
            **self.settings.NO_CACHE_HEADERS,
        }

    def fetch(
        self,
        url: str,
        *,
        accept: str | None = None,
        deadline: Deadline | None = None,
    ) -> FetchResult:
        """Issue one GET and return the response or a failure marker."""
        timeout = self._timeout
        if deadline is not None:
            if deadline.expired:
                logger.debug("Deadline expired before fetching %s", url)
                return FetchFailure(url=url, reason="deadline exceeded")
            timeout = deadline.clamp(timeout)

        try:
            resp = self.session.get(
                url,
                headers=self.identity_headers(accept),
                timeout=timeout,
                allow_redirects=True,
            )
            content_type = str(
                resp.headers.get("content-type", "") or ""
            )
            result = FetchResponse(
                url=url,
                status=int(resp.status_code),
                body=str(resp.text),
                content_type=content_type,
            )
        except Exception as exc:
            logger.warning(
                "Request error for %s: %s", url, exc,
            )
            return FetchFailure(url=url, reason=str(exc) or type(exc).__name__)

        if not result.ok:
            logger.info("HTTP %d for %s", result.status, url)
        return result
