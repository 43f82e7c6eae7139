from __future__ import annotations

import unittest
from collections import OrderedDict

from src.core.validators import ALLOWED_FIELD_TYPES, sanitize_message, validate_schema


class ValidateSchemaTest(unittest.TestCase):
    def test_accepts_every_allowed_type(self) -> None:
        schema = {f"field_{tag}": tag for tag in ALLOWED_FIELD_TYPES}
        self.assertTrue(validate_schema(schema))

    def test_type_tags_are_case_insensitive(self) -> None:
        self.assertTrue(validate_schema({"name": "String", "email": "EMAIL", "site": "Url"}))

    def test_accepts_any_mapping(self) -> None:
        self.assertTrue(validate_schema(OrderedDict([("age", "number")])))

    def test_rejects_empty_mapping(self) -> None:
        self.assertFalse(validate_schema({}))

    def test_rejects_non_mappings(self) -> None:
        for candidate in ([], [{"name": "string"}], "name", None, 42, ("name", "string")):
            with self.subTest(candidate=candidate):
                self.assertFalse(validate_schema(candidate))

    def test_rejects_unknown_type(self) -> None:
        self.assertFalse(validate_schema({"name": "string", "avatar": "image"}))

    def test_rejects_non_string_type(self) -> None:
        self.assertFalse(validate_schema({"name": "string", "age": 5}))
        self.assertFalse(validate_schema({"name": None}))


class SanitizeMessageTest(unittest.TestCase):
    def test_strips_whitespace_and_null_bytes(self) -> None:
        self.assertEqual(sanitize_message("  hi\x00 there \n"), "hi there")

    def test_empty_input(self) -> None:
        self.assertEqual(sanitize_message(""), "")
        self.assertEqual(sanitize_message(None), "")


if __name__ == "__main__":
    unittest.main()
