# tests/conftest.py

"""Shared pytest fixtures for all pipeline tests."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def block_network() -> Generator[None, None, None]:
    """Replace curl_cffi sessions so no test reaches the real storefront."""
    offline = MagicMock()
    offline.return_value.get.side_effect = ConnectionError(
        "network disabled in tests"
    )
    with patch(
        "storefront_catalog.scrapers.fetch_client.curl_requests.Session",
        offline,
    ):
        yield
