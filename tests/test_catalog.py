"""Unit tests for app.services.catalog: product list and product-by-id reads."""

import unittest
from unittest.mock import MagicMock

from google.api_core.exceptions import GoogleAPIError

from app.services.catalog import fetch_product_by_id, fetch_products


def _snap(doc_id: str, data: dict, exists: bool = True) -> MagicMock:
    snap = MagicMock()
    snap.id = doc_id
    snap.exists = exists
    snap.to_dict.return_value = data
    return snap


class TestFetchProducts(unittest.TestCase):
    """fetch_products issues one query and normalizes results."""

    def test_lists_active_products(self) -> None:
        db = MagicMock()
        query = db.collection.return_value.where.return_value.order_by.return_value
        query.stream.return_value = [_snap("A1", {"name": "Valve", "images": "a.png, b.png"})]
        result = fetch_products(db)
        self.assertIsNone(result.error)
        self.assertFalse(result.loading)
        self.assertEqual(result.data[0].images, ["a.png", "b.png"])
        db.collection.assert_called_once_with("products")
        db.collection.return_value.where.return_value.order_by.assert_called_once_with("name")

    def test_category_filter_adds_where_clause(self) -> None:
        db = MagicMock()
        query = db.collection.return_value.where.return_value.where.return_value.order_by.return_value
        query.stream.return_value = [_snap("A1", {"name": "Valve", "category": "valvula"})]
        result = fetch_products(db, "Valvula")
        self.assertEqual(len(result.data), 1)
        db.collection.return_value.where.return_value.where.assert_called_once()

    def test_not_configured(self) -> None:
        result = fetch_products(None)
        self.assertEqual(result.data, [])
        self.assertEqual(result.error, "Firestore no está configurado.")

    def test_query_error(self) -> None:
        db = MagicMock()
        db.collection.return_value.where.return_value.order_by.return_value.stream.side_effect = (
            GoogleAPIError("index missing")
        )
        result = fetch_products(db)
        self.assertEqual(result.data, [])
        self.assertEqual(result.error, "index missing")


class TestFetchProductById(unittest.TestCase):
    """fetch_product_by_id treats not-found as a normal result."""

    def test_found(self) -> None:
        db = MagicMock()
        db.collection.return_value.document.return_value.get.return_value = _snap(
            "A1", {"name": "Valve", "imagesRelated": "x.png"}
        )
        result = fetch_product_by_id(db, "A1")
        self.assertEqual(result.product.id, "A1")
        self.assertEqual(result.product.images_related, ["x.png"])
        self.assertIsNone(result.error)

    def test_not_found_is_not_an_error(self) -> None:
        db = MagicMock()
        db.collection.return_value.document.return_value.get.return_value = _snap("nope", {}, exists=False)
        result = fetch_product_by_id(db, "nope")
        self.assertIsNone(result.product)
        self.assertFalse(result.loading)
        self.assertIsNone(result.error)

    def test_missing_id(self) -> None:
        result = fetch_product_by_id(MagicMock(), None)
        self.assertIsNone(result.product)
        self.assertIsNone(result.error)

    def test_not_configured(self) -> None:
        self.assertEqual(fetch_product_by_id(None, "A1").error, "Firestore no está configurado.")

    def test_read_error(self) -> None:
        db = MagicMock()
        db.collection.return_value.document.return_value.get.side_effect = GoogleAPIError("unavailable")
        result = fetch_product_by_id(db, "A1")
        self.assertIsNone(result.product)
        self.assertEqual(result.error, "unavailable")


if __name__ == "__main__":
    unittest.main()
