# tests/test_cli_runner.py

"""Tests for the headless CLI runner."""

import io
import json
import unittest
from contextlib import redirect_stdout
from unittest.mock import AsyncMock, patch

from storefront_catalog.cli.runner import cli_fetch
from storefront_catalog.models.outcome import CatalogResult

ORCHESTRATOR_PATH = "storefront_catalog.cli.runner.CatalogOrchestrator"


class TestCliFetch(unittest.IsolatedAsyncioTestCase):
    """cli_fetch output and exit codes."""

    async def test_json_output_offline_uses_fallback(self) -> None:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            code = await cli_fetch("json", parser_name="regex")
        self.assertEqual(code, 0)
        records = json.loads(buffer.getvalue())
        self.assertGreater(len(records), 0)
        self.assertEqual(
            set(records[0]), {"id", "title", "url", "image", "price", "handle"}
        )

    async def test_empty_catalog_exit_code(self) -> None:
        with patch(ORCHESTRATOR_PATH) as mock_cls:
            mock_cls.return_value.fetch_catalog = AsyncMock(
                return_value=CatalogResult(used_fallback=True)
            )
            code = await cli_fetch("json")
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
