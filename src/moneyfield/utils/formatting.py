"""
Money Formatting and Parsing Primitives

This module provides the low-level money formatting/parsing primitive used by the
numeric input engine. It renders numbers with a currency symbol, thousands grouping
and fixed precision, and parses formatted text back into numbers with a lenient
policy (anything unparseable becomes zero).

Features:
- Decimal-backed fixed precision rendering with ROUND_HALF_UP rounding
- Configurable decimal and thousand separators (single or multi-character)
- Symbol placement driven by a format string ("%s" symbol, "%v" value)
- Separate positive/negative/zero layouts derived from one format string
- Lenient unformatting of user text, including parenthesised negatives

Author: Moneyfield Development Team
Version: 1.0.0
"""

import re
import math
import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from dataclasses import dataclass
from typing import Union, Optional, Any

# Configure logging for formatting operations
logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]

# Placeholders understood by symbol format strings
SYMBOL_TOKEN = "%s"
VALUE_TOKEN = "%v"
DEFAULT_FORMAT = VALUE_TOKEN

_DIGITS = "0123456789"
_PARENTHESISED_NEGATIVE = re.compile(r"\((?=\d+)(.*)\)")
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")


class FormattingError(Exception):
    """Custom exception for formatting operations errors."""
    pass


@dataclass(frozen=True)
class SymbolFormat:
    """Positive, negative and zero layouts derived from a single format string."""
    pos: str
    neg: str
    zero: str

    @classmethod
    def parse(cls, fmt: Optional[str]) -> "SymbolFormat":
        """
        Build the three layouts from a format string such as "%s %v".

        The negative layout drops any literal minus from the format and places
        one directly before the value. A format without "%v" is invalid and
        falls back to the default value-only layout.

        Args:
            fmt: Format string containing "%v" and optionally "%s"

        Returns:
            SymbolFormat: Layouts for positive, negative and zero amounts
        """
        if not isinstance(fmt, str) or VALUE_TOKEN not in fmt:
            logger.warning(f"Invalid symbol format {fmt!r}, using {DEFAULT_FORMAT!r}")
            fmt = DEFAULT_FORMAT

        return cls(
            pos=fmt,
            neg=fmt.replace("-", "").replace(VALUE_TOKEN, "-" + VALUE_TOKEN),
            zero=fmt,
        )

    def select(self, number: Number) -> str:
        """Return the layout matching the sign of number."""
        if number > 0:
            return self.pos
        if number < 0:
            return self.neg
        return self.zero


class MoneyParser:
    """
    Lenient parser turning formatted money text back into numbers.
    Never raises for text input: text without a parseable number yields 0.
    """

    @staticmethod
    def unformat(value: Any, decimal: str = ".") -> Number:
        """
        Parse a formatted amount into a number.

        Every character other than digits, the minus sign and the characters of
        the decimal separator is stripped, the decimal separator becomes the
        decimal point and the leading number is parsed.

        Args:
            value: Formatted text, or a number which is returned unchanged
            decimal: Decimal separator used in the text

        Returns:
            Number: Parsed value, 0 when nothing parseable is present

        Raises:
            FormattingError: If value is neither text nor a number

        Examples:
            >>> MoneyParser.unformat("$ 1,234.50")
            1234.5
            >>> MoneyParser.unformat("1.234,50", decimal=",")
            1234.5
            >>> MoneyParser.unformat("(12)")
            -12.0
            >>> MoneyParser.unformat("abc")
            0
        """
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            if isinstance(value, float) and math.isnan(value):
                return 0
            if isinstance(value, Decimal) and value.is_nan():
                return 0
            return value

        if value is None or isinstance(value, bool):
            return 0

        if not isinstance(value, str):
            raise FormattingError(f"Cannot unformat value of type {type(value).__name__}")

        decimal = decimal or "."
        text = _PARENTHESISED_NEGATIVE.sub(r"-\1", value)
        kept = "".join(ch for ch in text if ch in _DIGITS or ch == "-" or ch in decimal)
        kept = kept.replace(decimal, ".", 1)

        match = _LEADING_NUMBER.match(kept)
        if not match:
            return 0

        try:
            return float(match.group(0))
        except ValueError:
            return 0


class MoneyFormatter:
    """
    Money rendering utilities with fixed precision and thousands grouping.
    All rounding is done on Decimal values with ROUND_HALF_UP.
    """

    @staticmethod
    def check_precision(value: Any, base: int = 0) -> int:
        """
        Coerce a precision setting into a non-negative integer.

        Args:
            value: Requested precision (number or numeric text)
            base: Fallback when value is not numeric

        Returns:
            int: Rounded absolute precision
        """
        if isinstance(value, bool):
            return base
        try:
            precision = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            return base
        if not precision.is_finite():
            return base
        return int(abs(precision).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @staticmethod
    def to_fixed(value: Any, precision: Any = 0) -> str:
        """
        Render a value with exactly `precision` fractional digits.

        Args:
            value: Number or formatted text (unformatted with "." as decimal)
            precision: Number of fractional digits

        Returns:
            str: Fixed-decimal representation using "." as decimal point

        Raises:
            FormattingError: If the value is not finite

        Examples:
            >>> MoneyFormatter.to_fixed(10, 2)
            '10.00'
            >>> MoneyFormatter.to_fixed(0.615, 2)
            '0.62'
        """
        precision = MoneyFormatter.check_precision(precision)
        number = MoneyParser.unformat(value)

        try:
            decimal_value = Decimal(str(number))
        except (InvalidOperation, ValueError) as e:
            raise FormattingError(f"Invalid value '{value}': {str(e)}")

        if not decimal_value.is_finite():
            raise FormattingError(f"Cannot render non-finite value '{value}'")

        quantum = Decimal(1).scaleb(-precision)
        try:
            fixed = decimal_value.quantize(quantum, rounding=ROUND_HALF_UP)
        except InvalidOperation as e:
            raise FormattingError(f"Value '{value}' exceeds precision limits: {str(e)}")
        if fixed == 0:
            fixed = abs(fixed)
        return f"{fixed:f}"

    @staticmethod
    def format_number(number: Any, precision: Any = 0, thousand: str = ",",
                      decimal: str = ".") -> str:
        """
        Format a number with thousands grouping and fixed precision.

        Args:
            number: Number or formatted text
            precision: Number of fractional digits
            thousand: Separator inserted every three integer digits
            decimal: Separator between integer and fractional digits

        Returns:
            str: Grouped number string

        Examples:
            >>> MoneyFormatter.format_number(1234567.891, 2)
            '1,234,567.89'
            >>> MoneyFormatter.format_number(1234.5, 2, thousand=".", decimal=",")
            '1.234,50'
        """
        precision = MoneyFormatter.check_precision(precision)
        value = MoneyParser.unformat(number)

        fixed = MoneyFormatter.to_fixed(abs(value), precision)
        negative = value < 0 and Decimal(fixed) != 0
        integer_part, _, fraction_part = fixed.partition(".")

        head = len(integer_part) % 3 or 3
        groups = [integer_part[:head]]
        groups.extend(integer_part[i:i + 3] for i in range(head, len(integer_part), 3))

        formatted = ("-" if negative else "") + thousand.join(groups)
        if precision:
            formatted += decimal + fraction_part
        return formatted

    @staticmethod
    def format_money(number: Any, symbol: str = "", fmt: Optional[str] = DEFAULT_FORMAT,
                     precision: Any = 0, decimal: str = ".", thousand: str = ",") -> str:
        """
        Format a money amount with symbol placement, grouping and precision.

        Args:
            number: Amount as number or formatted text
            symbol: Currency symbol substituted for "%s"
            fmt: Layout string, e.g. "%s %v" or "%v %s"
            precision: Number of fractional digits
            decimal: Decimal separator
            thousand: Thousand separator

        Returns:
            str: Formatted amount

        Examples:
            >>> MoneyFormatter.format_money(-1234.5, "$", "%s %v", 2)
            '$ -1,234.50'
            >>> MoneyFormatter.format_money(99, "EUR", "%v %s")
            '99 EUR'
        """
        value = MoneyParser.unformat(number)
        layouts = SymbolFormat.parse(fmt)
        rendered = MoneyFormatter.format_number(abs(value), precision, thousand, decimal)

        if Decimal(MoneyFormatter.to_fixed(abs(value), precision)) == 0:
            layout = layouts.zero
        else:
            layout = layouts.select(value)

        return layout.replace(SYMBOL_TOKEN, symbol or "").replace(VALUE_TOKEN, rendered)


# Convenience functions for common formatting operations
def unformat(value: Any, decimal: str = ".") -> Number:
    """Convenience function for lenient money parsing."""
    return MoneyParser.unformat(value, decimal)


def to_fixed(value: Any, precision: Any = 0) -> str:
    """Convenience function for fixed-decimal rendering."""
    return MoneyFormatter.to_fixed(value, precision)


def check_precision(value: Any, base: int = 0) -> int:
    """Convenience function for precision coercion."""
    return MoneyFormatter.check_precision(value, base)


def format_number(number: Any, **kwargs) -> str:
    """Convenience function for grouped number formatting."""
    return MoneyFormatter.format_number(number, **kwargs)


def format_money(number: Any, **kwargs) -> str:
    """Convenience function for money formatting."""
    return MoneyFormatter.format_money(number, **kwargs)
