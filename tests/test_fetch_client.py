# tests/test_fetch_client.py

"""Tests for FetchClient identity headers and failure handling."""

import threading
import time
import unittest
from unittest.mock import MagicMock, patch

from storefront_catalog.config.settings import Settings
from storefront_catalog.scrapers.fetch_client import (
    Deadline,
    FetchClient,
    FetchFailure,
    FetchResponse,
)

SESSION_PATH = (
    "storefront_catalog.scrapers.fetch_client.curl_requests.Session"
)


def _mock_response(
    status: int = 200,
    text: str = "{}",
    content_type: str = "application/json",
) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    resp.headers = {"content-type": content_type}
    return resp


@patch(SESSION_PATH)
class TestFetchClient(unittest.TestCase):
    """FetchClient.fetch behaviour against a mocked curl_cffi session."""

    def test_returns_response(self, mock_session_cls: MagicMock) -> None:
        """A 200 comes back as an ok FetchResponse."""
        mock_session_cls.return_value.get.return_value = _mock_response(
            text='{"products": []}'
        )
        result = FetchClient().fetch("https://x/products.json")
        self.assertIsInstance(result, FetchResponse)
        assert isinstance(result, FetchResponse)
        self.assertTrue(result.ok)
        self.assertEqual(result.body, '{"products": []}')
        self.assertEqual(result.content_type, "application/json")

    def test_non_success_status_is_response(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A 404 is a response, not a failure marker."""
        mock_session_cls.return_value.get.return_value = _mock_response(
            status=404, text="Not Found", content_type="text/html"
        )
        result = FetchClient().fetch("https://x/missing")
        assert isinstance(result, FetchResponse)
        self.assertFalse(result.ok)
        self.assertEqual(result.status, 404)

    def test_exception_becomes_failure(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Network errors never escape."""
        mock_session_cls.return_value.get.side_effect = TimeoutError(
            "timed out"
        )
        result = FetchClient().fetch("https://x/slow")
        self.assertIsInstance(result, FetchFailure)
        assert isinstance(result, FetchFailure)
        self.assertIn("timed out", result.reason)

    def test_no_retries(self, mock_session_cls: MagicMock) -> None:
        """Exactly one request per fetch, even on failure."""
        mock_get = mock_session_cls.return_value.get
        mock_get.side_effect = ConnectionError("refused")
        FetchClient().fetch("https://x/down")
        self.assertEqual(mock_get.call_count, 1)

    def test_identity_headers_sent(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """User-Agent, Accept, Referer and no-cache headers are set."""
        mock_get = mock_session_cls.return_value.get
        mock_get.return_value = _mock_response()
        FetchClient().fetch(
            "https://x/products.json", accept=Settings.JSON_ACCEPT,
        )
        headers = mock_get.call_args.kwargs["headers"]
        self.assertEqual(headers["User-Agent"], Settings.USER_AGENT)
        self.assertEqual(headers["Accept"], Settings.JSON_ACCEPT)
        self.assertEqual(
            headers["Referer"], f"{Settings.STOREFRONT_BASE_URL}/"
        )
        self.assertEqual(headers["Cache-Control"], "no-cache")
        self.assertEqual(headers["Pragma"], "no-cache")

    def test_default_accept_is_html(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_get = mock_session_cls.return_value.get
        mock_get.return_value = _mock_response()
        FetchClient().fetch("https://x/")
        headers = mock_get.call_args.kwargs["headers"]
        self.assertEqual(headers["Accept"], Settings.HTML_ACCEPT)

    def test_expired_deadline_skips_request(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """No network I/O once the deadline has passed."""
        mock_get = mock_session_cls.return_value.get
        result = FetchClient().fetch(
            "https://x/late", deadline=Deadline(0.0)
        )
        self.assertIsInstance(result, FetchFailure)
        mock_get.assert_not_called()

    def test_timeout_clamped_to_deadline(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """The per-request timeout never outlives the deadline."""
        mock_get = mock_session_cls.return_value.get
        mock_get.return_value = _mock_response()
        FetchClient(timeout=15.0).fetch(
            "https://x/", deadline=Deadline(2.0)
        )
        timeout = mock_get.call_args.kwargs["timeout"]
        self.assertLessEqual(timeout, 2.0)
        self.assertGreater(timeout, 0.0)

    def test_session_per_thread(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Worker threads do not share a curl session."""
        mock_session_cls.side_effect = lambda **_: MagicMock()
        client = FetchClient()
        sessions: list[object] = [client.session]

        def grab() -> None:
            sessions.append(client.session)

        worker = threading.Thread(target=grab)
        worker.start()
        worker.join()
        self.assertIs(client.session, sessions[0])
        self.assertIsNot(sessions[0], sessions[1])


class TestDeadline(unittest.TestCase):
    """Deadline arithmetic."""

    def test_remaining_decreases(self) -> None:
        deadline = Deadline(10.0)
        first = deadline.remaining()
        time.sleep(0.01)
        self.assertLess(deadline.remaining(), first)
        self.assertFalse(deadline.expired)

    def test_zero_budget_is_expired(self) -> None:
        deadline = Deadline(0.0)
        self.assertTrue(deadline.expired)
        self.assertEqual(deadline.remaining(), 0.0)

    def test_clamp(self) -> None:
        self.assertLessEqual(Deadline(1.0).clamp(30.0), 1.0)
        self.assertEqual(Deadline(0.0).clamp(30.0), 0.0)


if __name__ == "__main__":
    unittest.main()
