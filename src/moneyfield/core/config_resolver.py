"""
Separator and symbol-format resolution for numeric money inputs.

Derives the effective decimal separator, thousand separator and symbol layout
from the shorthand and override props of a field configuration. Resolution is
pure and total: every configuration resolves, nothing is cached.
"""

from dataclasses import dataclass
from typing import Any, Optional

COMMA = ","
DOT = "."
SPACE = "space"

VALUE_ONLY_FORMAT = "%v"
PREFIX_FORMAT = "%s %v"
SUFFIX_FORMAT = "%v %s"


@dataclass(frozen=True)
class ResolvedConfig:
    """Effective rendering settings of one field configuration."""
    decimal_separator: str
    thousand_separator: str
    symbol_format: str


def resolve_decimal_separator(separator: Any, override: Optional[str] = None) -> str:
    # The decimal separator is the opposite of a comma grouping
    if override is not None:
        return override
    if separator == COMMA:
        return DOT
    return COMMA


def resolve_thousand_separator(separator: Any, override: Optional[str] = None) -> str:
    if override is not None:
        return override
    if separator == DOT:
        return DOT
    if separator == SPACE:
        return " "
    return COMMA


def resolve_symbol_format(currency_symbol: Optional[str], symbol_position: Any) -> str:
    if not currency_symbol:
        return VALUE_ONLY_FORMAT
    if getattr(symbol_position, "value", symbol_position) == "suffix":
        return SUFFIX_FORMAT
    return PREFIX_FORMAT


def resolve_config(config) -> ResolvedConfig:
    """
    Resolve the effective separators and symbol layout of a configuration.

    Args:
        config: Field configuration exposing separator, decimal_separator,
            thousand_separator, currency_symbol and symbol_position

    Returns:
        ResolvedConfig: Decimal separator, thousand separator and symbol format
    """
    return ResolvedConfig(
        decimal_separator=resolve_decimal_separator(config.separator, config.decimal_separator),
        thousand_separator=resolve_thousand_separator(config.separator, config.thousand_separator),
        symbol_format=resolve_symbol_format(config.currency_symbol, config.symbol_position),
    )
