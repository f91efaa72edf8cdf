"""
Tests for the row coercion helpers.
"""

import pytest

from core.utils import normalize_id, normalize_ids, safe_get, safe_text, to_flag, to_number


class TestNormalizeId:

    @pytest.mark.parametrize("raw,expected", [
        (3, "3"),
        (3.0, "3"),
        ("  silk ", "silk"),
        ("", None),
        (None, None),
        (True, None),
    ])
    def test_normalize_id(self, raw, expected):
        assert normalize_id(raw) == expected

    def test_numeric_and_string_ids_compare_equal(self):
        assert normalize_id(7) == normalize_id("7")

    def test_normalize_ids_dedupes_in_order(self):
        assert normalize_ids([3, "3", " silk ", None, "", "cotton"]) == ["3", "silk", "cotton"]

    def test_normalize_ids_rejects_non_lists(self):
        assert normalize_ids("silk") == []
        assert normalize_ids({"a": 1}) == []
        assert normalize_ids(None) == []


class TestToNumber:

    @pytest.mark.parametrize("raw,expected", [
        (5000, 5000.0),
        ("1200.5", 1200.5),
        (" 42 ", 42.0),
        ("abc", None),
        ("", None),
        (None, None),
        (False, None),
        (float("nan"), None),
        (float("inf"), None),
    ])
    def test_to_number(self, raw, expected):
        assert to_number(raw) == expected


class TestToFlag:

    @pytest.mark.parametrize("raw,expected", [
        (True, True),
        (False, False),
        ("true", True),
        (" TRUE ", True),
        ("false", False),
        ("0", False),
        ("1", True),
        (1, True),
        (0, False),
        (None, False),
        ([], False),
    ])
    def test_to_flag(self, raw, expected):
        assert to_flag(raw) is expected


class TestTextAndLookup:

    def test_safe_text(self):
        assert safe_text(None) == ""
        assert safe_text(" Lahore ") == "Lahore"

    def test_safe_get_nested(self):
        row = {"spec": {"fabricTypeIds": ["silk"]}}

        assert safe_get(row, "spec", "fabricTypeIds") == ["silk"]
        assert safe_get(row, "spec", "colorShadeIds", default=[]) == []
        assert safe_get({"spec": "oops"}, "spec", "fabricTypeIds") is None
