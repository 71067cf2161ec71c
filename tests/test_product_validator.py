# tests/test_product_validator.py

"""Tests for ProductValidator invariant checks."""

import unittest

from storefront_catalog.config.settings import Settings
from storefront_catalog.filters.product_validator import ProductValidator
from storefront_catalog.models.product import Product

BASE = Settings.STOREFRONT_BASE_URL


class TestProductValidator(unittest.TestCase):
    """ProductValidator.validate behaviour."""

    def test_valid_products_kept(self) -> None:
        products = [
            Product(id="1", title="Tank", url=f"{BASE}/products/tank"),
            Product(id="2", title="Hoodie", url=f"{BASE}/"),
        ]
        valid, dropped = ProductValidator.validate(products)
        self.assertEqual(valid, products)
        self.assertEqual(dropped, 0)

    def test_blank_title_dropped(self) -> None:
        products = [
            Product(id="1", title="  ", url=f"{BASE}/products/x"),
        ]
        valid, dropped = ProductValidator.validate(products)
        self.assertEqual(valid, [])
        self.assertEqual(dropped, 1)

    def test_foreign_or_relative_url_dropped(self) -> None:
        products = [
            Product(id="1", title="A", url="https://other.example/p"),
            Product(id="2", title="B", url="/products/b"),
        ]
        valid, dropped = ProductValidator.validate(products)
        self.assertEqual(valid, [])
        self.assertEqual(dropped, 2)

    def test_lookalike_host_dropped(self) -> None:
        """The domain must be the host or its parent, not a substring."""
        domain = Settings.STOREFRONT_DOMAIN
        products = [
            Product(id="1", title="A", url=f"https://{domain}.evil.net/p"),
            Product(id="2", title="B", url=f"https://not{domain}/p"),
            Product(id="3", title="C", url=f"https://shop.{domain}/p"),
        ]
        valid, dropped = ProductValidator.validate(products)
        self.assertEqual([p.id for p in valid], ["3"])
        self.assertEqual(dropped, 2)

    def test_reject_reason(self) -> None:
        self.assertEqual(
            ProductValidator.reject_reason(
                Product(id="1", title="", url=f"{BASE}/")
            ),
            "empty title",
        )
        self.assertIsNone(
            ProductValidator.reject_reason(
                Product(id="1", title="A", url=f"{BASE}/products/a")
            )
        )

    def test_price_is_not_required(self) -> None:
        """Business rules such as pricing are not validated."""
        products = [
            Product(id="1", title="A", url=f"{BASE}/products/a"),
        ]
        valid, _ = ProductValidator.validate(products)
        self.assertEqual(len(valid), 1)


if __name__ == "__main__":
    unittest.main()
