# tests/test_fallback_provider.py

"""Tests for the bundled fallback catalog."""

import json
import tempfile
import unittest
from pathlib import Path

from storefront_catalog.config.settings import Settings
from storefront_catalog.scrapers.fallback_provider import FallbackProvider

BASE = Settings.STOREFRONT_BASE_URL


class TestFallbackProvider(unittest.TestCase):
    """FallbackProvider.products behaviour."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, content: str) -> Path:
        path = self.tmp_dir / "fallback.json"
        path.write_text(content, encoding="utf-8")
        return path

    def test_bundled_dataset(self) -> None:
        products = FallbackProvider().products()
        self.assertGreaterEqual(len(products), 5)
        for p in products:
            self.assertTrue(p.title.strip())
            self.assertTrue(p.url.startswith(f"{BASE}/products/"))
        self.assertEqual(len({p.url for p in products}), len(products))

    def test_record_mapping(self) -> None:
        path = self._write(json.dumps([
            {
                "id": "x-1",
                "name": "  Shaker   Bottle ",
                "handle": "shaker-bottle",
                "price": 12.5,
                "images": ["/cdn/shop/files/shaker.jpg"],
            }
        ]))
        (product,) = FallbackProvider(path).products()
        self.assertEqual(product.id, "x-1")
        self.assertEqual(product.title, "Shaker Bottle")
        self.assertEqual(product.url, f"{BASE}/products/shaker-bottle")
        self.assertEqual(product.image, f"{BASE}/cdn/shop/files/shaker.jpg")
        self.assertEqual(product.price, 12.5)

    def test_nameless_and_duplicate_records_dropped(self) -> None:
        path = self._write(json.dumps([
            {"id": "1", "name": "A", "handle": "a"},
            {"id": "2", "handle": "b"},
            {"id": "3", "name": "A again", "handle": "a"},
            "not a record",
        ]))
        products = FallbackProvider(path).products()
        self.assertEqual([p.id for p in products], ["1"])

    def test_missing_file_yields_empty(self) -> None:
        provider = FallbackProvider(self.tmp_dir / "absent.json")
        self.assertEqual(provider.products(), [])

    def test_malformed_file_yields_empty(self) -> None:
        self.assertEqual(
            FallbackProvider(self._write("{oops")).products(), []
        )

    def test_non_list_yields_empty(self) -> None:
        path = self._write(json.dumps({"products": []}))
        self.assertEqual(FallbackProvider(path).products(), [])


if __name__ == "__main__":
    unittest.main()
