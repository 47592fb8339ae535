"""Unit tests for app.services.normalize: list splitting, timestamps, product and user parsing."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock

from app.services.normalize import (
    parse_app_user,
    parse_dimension_data,
    parse_product,
    split_list_field,
    to_datetime,
)

NOW = datetime(2024, 8, 1, 12, 0, tzinfo=UTC)


class TestSplitListField(unittest.TestCase):
    """split_list_field accepts lists or comma-joined strings."""

    def test_comma_joined_string_is_split_and_trimmed(self) -> None:
        self.assertEqual(
            split_list_field(" a.png, b.png ,c.png"),
            ["a.png", "b.png", "c.png"],
        )

    def test_empty_parts_are_dropped_and_order_kept(self) -> None:
        self.assertEqual(split_list_field("z.png,, ,a.png,"), ["z.png", "a.png"])

    def test_list_is_kept(self) -> None:
        self.assertEqual(split_list_field(["x", "y"]), ["x", "y"])

    def test_missing_or_other_types_become_empty(self) -> None:
        self.assertEqual(split_list_field(None), [])
        self.assertEqual(split_list_field(42), [])
        self.assertEqual(split_list_field(""), [])


class TestToDatetime(unittest.TestCase):
    """to_datetime converts provider timestamps and falls back to now."""

    def test_datetime_passthrough(self) -> None:
        value = datetime(2024, 1, 2, tzinfo=UTC)
        self.assertEqual(to_datetime(value, NOW), value)

    def test_naive_datetime_gets_utc(self) -> None:
        self.assertEqual(to_datetime(datetime(2024, 1, 2), NOW).tzinfo, UTC)

    def test_provider_conversion_method(self) -> None:
        ts = MagicMock()
        ts.to_datetime.return_value = datetime(2023, 5, 6, tzinfo=UTC)
        self.assertEqual(to_datetime(ts, NOW), datetime(2023, 5, 6, tzinfo=UTC))

    def test_protobuf_style_conversion_method(self) -> None:
        class ProtoTimestamp:
            def ToDatetime(self) -> datetime:
                return datetime(2022, 3, 4)

        self.assertEqual(to_datetime(ProtoTimestamp(), NOW), datetime(2022, 3, 4, tzinfo=UTC))

    def test_iso_string(self) -> None:
        self.assertEqual(
            to_datetime("2024-07-28T10:00:00Z", NOW),
            datetime(2024, 7, 28, 10, 0, tzinfo=UTC),
        )

    def test_epoch_milliseconds(self) -> None:
        self.assertEqual(to_datetime(0, NOW), datetime(1970, 1, 1, tzinfo=UTC))

    def test_missing_or_garbage_falls_back_to_now(self) -> None:
        self.assertEqual(to_datetime(None, NOW), NOW)
        self.assertEqual(to_datetime("not a date", NOW), NOW)
        self.assertEqual(to_datetime(True, NOW), NOW)


class TestParseProduct(unittest.TestCase):
    """parse_product is total and returns canonical list fields."""

    def test_comma_joined_images_become_list(self) -> None:
        product = parse_product(
            "A1",
            {"code": "A1", "name": "Valve", "images": "a.png, b.png", "imagesRelated": "c.png"},
            NOW,
        )
        self.assertEqual(product.images, ["a.png", "b.png"])
        self.assertEqual(product.images_related, ["c.png"])

    def test_empty_document_gets_defaults(self) -> None:
        product = parse_product("X9", None, NOW)
        self.assertEqual(product.id, "X9")
        self.assertEqual(product.code, "X9")
        self.assertEqual(product.name, "")
        self.assertEqual(product.images, [])
        self.assertEqual(product.dimension_data, [])
        self.assertTrue(product.is_active)
        self.assertEqual(product.created_at, NOW)
        self.assertEqual(product.updated_at, NOW)
        self.assertIsNone(product.price)

    def test_camel_case_fields_are_mapped(self) -> None:
        product = parse_product(
            "A1",
            {
                "seoTitle": "SEO",
                "dimensionImage": "images/productImage/d.png",
                "dimensionData": [{"label": "Dim 1", "value": "6 mm"}],
                "price": 1250,
                "stock": "7",
                "isActive": False,
                "aiHint": "valvula",
            },
            NOW,
        )
        self.assertEqual(product.seo_title, "SEO")
        self.assertEqual(product.dimension_image, "images/productImage/d.png")
        self.assertEqual(product.dimension_data[0].value, "6 mm")
        self.assertEqual(product.price, 1250)
        self.assertEqual(product.stock, 7)
        self.assertFalse(product.is_active)
        self.assertEqual(product.ai_hint, "valvula")

    def test_malformed_dimension_entries_are_dropped(self) -> None:
        items = parse_dimension_data([{"label": "A", "value": "1"}, "junk", {"label": "B"}])
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].label, "A")

    def test_non_numeric_price_is_none(self) -> None:
        self.assertIsNone(parse_product("A1", {"price": "n/a"}, NOW).price)


class TestParseAppUser(unittest.TestCase):
    """parse_app_user maps stored keys and defaults unknown roles."""

    def test_maps_fields(self) -> None:
        user = parse_app_user(
            "u1",
            {
                "email": "ana@example.com",
                "displayName": "Ana Ruiz",
                "role": "editor",
                "company": "Bluefitt",
                "photoURL": "https://example.com/a.png",
                "createdAt": datetime(2024, 1, 1, tzinfo=UTC),
            },
            NOW,
        )
        self.assertEqual(user.uid, "u1")
        self.assertEqual(user.display_name, "Ana Ruiz")
        self.assertEqual(user.role, "editor")
        self.assertEqual(user.company, "Bluefitt")
        self.assertEqual(user.photo_url, "https://example.com/a.png")

    def test_unknown_role_becomes_user(self) -> None:
        self.assertEqual(parse_app_user("u1", {"role": "root"}, NOW).role, "user")

    def test_empty_company_is_none(self) -> None:
        self.assertIsNone(parse_app_user("u1", {"company": ""}, NOW).company)


if __name__ == "__main__":
    unittest.main()
