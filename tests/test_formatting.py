"""
Test suite for the money formatting primitive: unformat, to_fixed, check_precision,
format_number and format_money.
"""

import math
from decimal import Decimal

import pytest

# Local ----------------------------------------------------------------------------------------------------------------

from moneyfield.utils.formatting import (
    FormattingError,
    SymbolFormat,
    check_precision,
    format_money,
    format_number,
    to_fixed,
    unformat,
)


class TestUnformat:
    """Lenient parsing of formatted money text."""

    @pytest.mark.parametrize(
        "text, decimal, expected",
        [
            pytest.param("$ 1,234.50", ".", 1234.5, id="prefix-symbol"),
            pytest.param("1.234,50", ",", 1234.5, id="comma-decimal"),
            pytest.param("1 234,5 kr", ",", 1234.5, id="space-grouping-suffix"),
            pytest.param("-5", ".", -5.0, id="negative"),
            pytest.param("$ -42.42", ".", -42.42, id="negative-with-symbol"),
            pytest.param("(12)", ".", -12.0, id="parenthesised-negative"),
            pytest.param("12-3", ".", 12.0, id="leading-number-only"),
            pytest.param(".5", ".", 0.5, id="leading-decimal-point"),
        ],
    )
    def test_parse_text(self, text, decimal, expected):
        """Parse formatted text using the given decimal separator."""
        assert unformat(text, decimal) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "text",
        [
            pytest.param("abc", id="letters"),
            pytest.param("", id="empty"),
            pytest.param("--5", id="double-minus"),
            pytest.param("-", id="minus-only"),
            pytest.param(None, id="none"),
            pytest.param(True, id="bool"),
        ],
    )
    def test_unparseable_yields_zero(self, text):
        """Return 0 instead of raising for input without a number."""
        assert unformat(text) == 0

    def test_numbers_pass_through(self):
        """Return numeric input unchanged."""
        assert unformat(42) == 42
        assert isinstance(unformat(42), int)
        assert unformat(Decimal("1.5")) == Decimal("1.5")

    @pytest.mark.parametrize(
        "value",
        [
            pytest.param(math.nan, id="float-nan"),
            pytest.param(Decimal("NaN"), id="decimal-nan"),
            pytest.param(Decimal("sNaN"), id="decimal-signaling-nan"),
        ],
    )
    def test_nan_becomes_zero(self, value):
        assert unformat(value) == 0

    def test_multi_character_decimal(self):
        """Treat a multi-character decimal separator as the decimal point."""
        assert unformat("1 234 dec 5", "dec") == pytest.approx(1234.5)

    def test_unsupported_type_raises(self):
        with pytest.raises(FormattingError):
            unformat([1, 2])


class TestToFixed:
    """Fixed-decimal rendering with ROUND_HALF_UP."""

    @pytest.mark.parametrize(
        "value, precision, expected",
        [
            pytest.param(10, 2, "10.00", id="pad-fraction"),
            pytest.param(0.615, 2, "0.62", id="half-up"),
            pytest.param(2.5, 0, "3", id="half-up-integer"),
            pytest.param(-2.5, 0, "-3", id="half-away-from-zero"),
            pytest.param(-0.004, 2, "0.00", id="no-negative-zero"),
            pytest.param("1,234.567", 2, "1234.57", id="text-input"),
            pytest.param("abc", 2, "0.00", id="unparseable-text"),
            pytest.param(1e16, 0, "10000000000000000", id="large-float"),
        ],
    )
    def test_to_fixed(self, value, precision, expected):
        assert to_fixed(value, precision) == expected

    def test_infinite_value_raises(self):
        with pytest.raises(FormattingError):
            to_fixed(math.inf, 2)


class TestCheckPrecision:
    """Coercion of precision settings."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(2, 2, id="int"),
            pytest.param(2.4, 2, id="round-down"),
            pytest.param(2.5, 3, id="round-half-up"),
            pytest.param(-3, 3, id="absolute"),
            pytest.param("2", 2, id="numeric-text"),
            pytest.param("x", 0, id="text-fallback"),
            pytest.param(None, 0, id="none-fallback"),
            pytest.param(math.nan, 0, id="nan-fallback"),
        ],
    )
    def test_check_precision(self, value, expected):
        assert check_precision(value) == expected


class TestFormatNumber:
    """Thousands grouping and precision."""

    @pytest.mark.parametrize(
        "number, kwargs, expected",
        [
            pytest.param(999, {}, "999", id="no-grouping"),
            pytest.param(1000, {}, "1,000", id="four-digits"),
            pytest.param(100000, {}, "100,000", id="six-digits"),
            pytest.param(1234567, {"thousand": " "}, "1 234 567", id="space-thousand"),
            pytest.param(1234567.891, {"precision": 2}, "1,234,567.89", id="precision"),
            pytest.param(1234.5, {"precision": 2, "thousand": ".", "decimal": ","}, "1.234,50", id="swapped"),
            pytest.param(-1234.5, {"precision": 1}, "-1,234.5", id="negative"),
            pytest.param("1,234.567", {"precision": 2}, "1,234.57", id="text-input"),
        ],
    )
    def test_format_number(self, number, kwargs, expected):
        assert format_number(number, **kwargs) == expected


class TestFormatMoney:
    """Symbol placement and sign layouts."""

    @pytest.mark.parametrize(
        "number, kwargs, expected",
        [
            pytest.param(1234.5, {"symbol": "$", "fmt": "%s %v", "precision": 2}, "$ 1,234.50", id="prefix"),
            pytest.param(-1234.5, {"symbol": "$", "fmt": "%s %v", "precision": 2}, "$ -1,234.50", id="negative-prefix"),
            pytest.param(0, {"symbol": "$", "fmt": "%s %v", "precision": 2}, "$ 0.00", id="zero"),
            pytest.param(-0.001, {"symbol": "$", "fmt": "%s %v", "precision": 2}, "$ 0.00", id="rounds-to-zero"),
            pytest.param(99, {"symbol": "EUR", "fmt": "%v %s"}, "99 EUR", id="suffix"),
            pytest.param(1234567.891, {"precision": 2, "decimal": ",", "thousand": "."}, "1.234.567,89", id="value-only"),
            pytest.param(5, {"symbol": "$", "fmt": "%s"}, "5", id="invalid-format-fallback"),
        ],
    )
    def test_format_money(self, number, kwargs, expected):
        assert format_money(number, **kwargs) == expected


class TestSymbolFormat:

    def test_negative_layout_places_minus_before_value(self):
        layouts = SymbolFormat.parse("%s %v")
        assert layouts.pos == "%s %v"
        assert layouts.neg == "%s -%v"
        assert layouts.zero == "%s %v"

    def test_literal_minus_is_dropped_from_negative_layout(self):
        assert SymbolFormat.parse("-%v %s").neg == "-%v %s"

    def test_select_by_sign(self):
        layouts = SymbolFormat.parse("%v %s")
        assert layouts.select(1) == "%v %s"
        assert layouts.select(-1) == "-%v %s"
        assert layouts.select(0) == "%v %s"
