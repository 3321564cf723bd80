#!/usr/bin/env python3
"""
Value Engine for Numeric Money Inputs

This module converts between the canonical numeric value of an input and its
display string. Parsing is lenient (unparseable text becomes zero), out of range
and disallowed negative values are silently clamped, and rendering applies the
currency symbol, separators and fixed precision of the current configuration.

Key Features:
- Lenient unformatting with empty-value substitution
- Sequential range and sign clamping with a fixed check order
- Money rendering through the Decimal-backed formatting primitive
- Fixed-decimal and output-type conversion for committed values

Author: Moneyfield Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Optional, Union

from moneyfield.core.config_resolver import ResolvedConfig, resolve_config
from moneyfield.utils.config import NumericFieldConfig
from moneyfield.utils.formatting import Number, format_money, to_fixed, unformat
from moneyfield.utils.logging import LogCategory

logger = logging.getLogger(__name__)

_LOG_EXTRA = {"category": LogCategory.VALUE_ENGINE.value}


class ValueEngine:
    """
    Converts between canonical values and display strings for one input.

    All operations are pure given the current configuration. The configuration
    is resolved on every call, so replacing it takes effect immediately.
    """

    def __init__(self, config: Optional[NumericFieldConfig] = None):
        """
        Initialize the value engine.

        Args:
            config: Field configuration, defaults to NumericFieldConfig()
        """
        self._config = config if config is not None else NumericFieldConfig()

    @property
    def config(self) -> NumericFieldConfig:
        return self._config

    @config.setter
    def config(self, config: NumericFieldConfig) -> None:
        self._config = config

    def resolved(self) -> ResolvedConfig:
        """Resolve separators and symbol layout of the current configuration."""
        return resolve_config(self._config)

    def unformat(self, value: Any) -> Number:
        """
        Parse a display string or raw value into a number.

        The empty string is replaced by the configured empty value before
        parsing. The currency symbol and thousand separator are stripped from
        text, so symbols such as "Rs." do not leak a decimal point into the
        number. Text without parseable digits yields 0.

        Args:
            value: Display text or number

        Returns:
            Number: Parsed value
        """
        resolved = self.resolved()
        decimal = resolved.decimal_separator
        if isinstance(value, str):
            if value == "":
                return self._config.empty.to_number(decimal)
            value = self._strip_decorations(value, resolved)
        return unformat(value, decimal)

    def _strip_decorations(self, text: str, resolved: ResolvedConfig) -> str:
        symbol = self._config.currency_symbol
        if symbol:
            text = text.replace(symbol, "")
        thousand = resolved.thousand_separator
        # A thousand separator contained in the decimal one is left to the primitive
        if thousand and thousand not in resolved.decimal_separator:
            text = text.replace(thousand, "")
        return text

    def clamp(self, value: Number) -> Number:
        """
        Constrain a value to the configured range and sign policy.

        Checks run in a fixed order and each one overwrites the running result:
        the upper bound, then the lower bound, then the sign policy. All three
        compare against the original value.

        Args:
            value: Number to constrain

        Returns:
            Number: Clamped value
        """
        config = self._config
        result = value

        if value >= config.max_value:
            result = config.max_value
        if value <= config.min_value:
            result = config.min_value
        if not config.minus and value < 0:
            result = config.min_value if config.min_value >= 0 else 0

        if result != value:
            logger.debug(f"Clamped {value} to {result}", extra=_LOG_EXTRA)
        return result

    def format(self, value: Any) -> Optional[str]:
        """
        Render a value as a display string.

        The empty string and None pass through unchanged. Text is unformatted
        first; the number is clamped and rendered.

        Args:
            value: Number, display text, "" or None

        Returns:
            Optional[str]: Display string, or the untouched empty input
        """
        if value is None or (isinstance(value, str) and value == ""):
            return value
        return self.render(self.clamp(self.unformat(value)))

    def process(self, value: Any) -> str:
        """
        Derive a display string from a raw external value.

        Unlike format(), an empty input is resolved through the empty value.

        Args:
            value: Canonical value supplied by the owner

        Returns:
            str: Display string
        """
        return self.render(self.clamp(self.unformat(value)))

    def render(self, value: Number) -> str:
        """Render an already clamped number with symbol, separators and precision."""
        config = self._config
        resolved = self.resolved()
        return format_money(
            value,
            symbol=config.currency_symbol,
            fmt=resolved.symbol_format,
            precision=config.precision,
            decimal=resolved.decimal_separator,
            thousand=resolved.thousand_separator,
        )

    def to_fixed(self, value: Number) -> str:
        """Fixed-decimal representation at the configured precision."""
        return to_fixed(value, self._config.precision)

    def to_output(self, value: Number) -> Union[int, float, str]:
        """
        Convert a committed number into the value emitted to the owner.

        Args:
            value: Clamped number

        Returns:
            The fixed-decimal string when the output type is "string"
            (case-insensitive), otherwise the rounded number
        """
        fixed = self.to_fixed(value)
        if self._config.emits_string:
            return fixed
        if self._config.precision == 0:
            return int(fixed)
        return float(fixed)
