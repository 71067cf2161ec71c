# tests/test_health_checker.py

"""Tests for storefront endpoint health probes."""

import unittest

from canned_client import CannedHttpClient

from storefront_catalog.config.settings import Settings
from storefront_catalog.services.health_checker import (
    HealthChecker,
    probe_endpoint,
    storefront_endpoints,
)

PRIMARY = Settings.storefront_url(Settings.PRIMARY_JSON_PATH)


class TestProbeEndpoint(unittest.TestCase):
    """probe_endpoint status classification."""

    def _endpoint(self) -> dict[str, str]:
        return {"id": "primary_json", "url": PRIMARY}

    def test_ok(self) -> None:
        client = CannedHttpClient()
        client.add(PRIMARY, "{}", content_type="application/json")
        result = probe_endpoint(self._endpoint(), client)
        self.assertEqual(result.status, "ok")
        self.assertEqual(result.message, "")

    def test_http_error_is_down(self) -> None:
        client = CannedHttpClient()
        client.add(PRIMARY, "gone", status=503)
        result = probe_endpoint(self._endpoint(), client)
        self.assertEqual(result.status, "down")
        self.assertEqual(result.message, "HTTP 503")

    def test_unreachable_is_down(self) -> None:
        result = probe_endpoint(self._endpoint(), CannedHttpClient())
        self.assertEqual(result.status, "down")
        self.assertIn("refused", result.message)


class TestHealthChecker(unittest.IsolatedAsyncioTestCase):
    """HealthChecker.check_all over every ladder endpoint."""

    async def test_all_endpoints_probed(self) -> None:
        client = CannedHttpClient()
        client.add(PRIMARY, "{}", content_type="application/json")
        results = await HealthChecker(client).check_all()

        self.assertEqual(
            [r.endpoint_id for r in results],
            ["primary_json", "secondary_json", "sitemap", "collection_html"],
        )
        by_id = {r.endpoint_id: r.status for r in results}
        self.assertEqual(by_id["primary_json"], "ok")
        self.assertEqual(by_id["sitemap"], "down")
        self.assertEqual(
            sorted(client.requested),
            sorted(e["url"] for e in storefront_endpoints()),
        )


if __name__ == "__main__":
    unittest.main()
