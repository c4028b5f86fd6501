"""
Tests for loose value coercion and comparison.
"""

import pytest

from minty.expressions import values


class TestNumericCoercion:

    @pytest.mark.parametrize("value,expected", [
        (1, True),
        (1.5, True),
        ("42", True),
        (" -1.5 ", True),
        ("1e3", True),
        (".5", True),
        ("abc", False),
        ("", False),
        (True, False),
        (None, False),
        ([1], False),
    ])
    def test_is_numeric(self, value, expected):
        assert values.is_numeric(value) is expected

    def test_to_number(self):
        """Integral text becomes int, other numeric text float, the rest 0."""
        assert values.to_number("7") == 7
        assert isinstance(values.to_number("7"), int)
        assert values.to_number("7.25") == 7.25
        assert values.to_number("seven") == 0
        assert values.to_number(True) == 1

    def test_to_int_truncates(self):
        assert values.to_int("9.9") == 9
        assert values.to_int(-2.7) == -2
        assert values.to_int(float("nan")) == 0

    @pytest.mark.parametrize("value,expected", [
        (2.0, "2"),
        (7.5, "7.5"),
        (-3, "-3"),
        (0.1 + 0.2, "0.3"),
        (1 / 3, "0.33333333333333"),
        (2.5e-7, "2.5e-07"),
    ])
    def test_format_number(self, value, expected):
        assert values.format_number(value) == expected


class TestStringForm:

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (True, "1"),
        (False, ""),
        (3, "3"),
        (2.0, "2"),
        ("text", "text"),
        ([1, 2], ""),
        ({"a": 1}, ""),
    ])
    def test_to_string(self, value, expected):
        assert values.to_string(value) == expected

    def test_undefined_marker(self):
        """UNDEFINED is a falsy singleton without a string form."""
        assert values.Undefined() is values.UNDEFINED
        assert not values.UNDEFINED
        assert values.to_string(values.UNDEFINED) == ""
        assert repr(values.UNDEFINED) == "UNDEFINED"


class TestComparison:

    @pytest.mark.parametrize("left,right,expected", [
        (5, "5", True),
        ("5.0", 5, True),
        (10, "10", True),
        (None, None, True),
        (None, False, True),
        (None, 0, True),
        (True, "yes", True),
        ("abc", "abc", True),
        ("abc", "abd", False),
        (1, "one", False),
        ([1], [1], True),
    ])
    def test_loose_equals(self, left, right, expected):
        assert values.loose_equals(left, right) is expected

    def test_ordered_numeric(self):
        """Numeric text compares numerically."""
        assert values.less_than("9", "10") is True
        assert values.greater_equal(10, "10") is True
        assert values.less_equal(2.5, 2) is False

    def test_ordered_strings(self):
        """Non-numeric strings compare lexically."""
        assert values.less_than("apple", "banana") is True
        assert values.greater_than("b", "a") is True

    def test_ordered_incomparable(self):
        """Incomparable values are never ordered."""
        assert values.less_than({"a": 1}, [1]) is False
        assert values.greater_than({"a": 1}, [1]) is False
