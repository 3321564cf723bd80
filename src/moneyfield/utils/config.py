"""
Configuration Management Utilities

This module provides the configuration layer for numeric money inputs: the
immutable per-field configuration model, the empty-value tagged union, named
preset loading from JSON files and process-level settings read from the
environment.

Key Features:
- Pydantic model of every input prop with camelCase aliases
- Rejection of configurations whose resolved separators collide
- JSON preset files validated field by field
- Environment variable management with python-dotenv

Author: Moneyfield Development Team
Version: 1.0.0
"""

import json
import os
import logging
from enum import Enum
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, Any, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from moneyfield.core.config_resolver import resolve_config
from moneyfield.utils.formatting import Number, check_precision, unformat

# Configure logging
logger = logging.getLogger(__name__)

# Bounds of exactly representable integers in a double
MAX_SAFE_INTEGER = 2 ** 53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER

ENV_PREFIX = "MONEYFIELD_"


class ConfigurationError(Exception):
    """Raised when configuration files or presets cannot be loaded."""
    pass


class SymbolPosition(str, Enum):
    """Placement of the currency symbol relative to the value."""
    PREFIX = "prefix"
    SUFFIX = "suffix"


class EmptyValueKind(Enum):
    """Tags of the empty-value union."""
    NUMERIC = "numeric"
    TEXT = "text"


@dataclass(frozen=True)
class EmptyValue:
    """Value emitted and parsed when the input holds no text."""
    kind: EmptyValueKind
    raw: Union[int, float, str]

    @classmethod
    def of(cls, raw: Union[int, float, str]) -> "EmptyValue":
        if isinstance(raw, str):
            return cls(EmptyValueKind.TEXT, raw)
        return cls(EmptyValueKind.NUMERIC, raw)

    def to_number(self, decimal: str = ".") -> Number:
        """Resolve the sentinel to a number at parse time."""
        if self.kind is EmptyValueKind.NUMERIC:
            return self.raw
        return unformat(self.raw, decimal)


# ============================================================================
# Configuration Data Models
# ============================================================================

class NumericFieldConfig(BaseModel):
    """Immutable snapshot of the props of one numeric money input."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    currency_symbol: str = Field(default="", alias="currency", description="Currency symbol, empty for none")
    symbol_position: SymbolPosition = Field(default=SymbolPosition.PREFIX, alias="currencySymbolPosition")
    precision: int = Field(default=0, ge=0, description="Number of fractional digits")
    separator: str = Field(default=",", description="Shorthand: ',', '.' or 'space'")
    decimal_separator: Optional[str] = Field(default=None, alias="decimalSeparator")
    thousand_separator: Optional[str] = Field(default=None, alias="thousandSeparator")
    min_value: Union[int, float] = Field(default=MIN_SAFE_INTEGER, alias="min")
    max_value: Union[int, float] = Field(default=MAX_SAFE_INTEGER, alias="max")
    minus: bool = Field(default=False, description="Whether negative values are allowed")
    empty_value: Union[int, float, str] = Field(default="", alias="emptyValue")
    output_type: str = Field(default="number", alias="outputType")
    read_only_class: str = Field(default="", alias="readOnlyClass")
    placeholder: Optional[str] = Field(default=None)

    @field_validator("precision", mode="before")
    @classmethod
    def coerce_precision(cls, v):
        """Round the absolute value of numeric precisions to an integer."""
        if isinstance(v, int) and not isinstance(v, bool):
            return abs(v)
        return check_precision(v)

    @model_validator(mode="after")
    def validate_distinct_separators(self):
        """Decimal and thousand separators must resolve to different strings."""
        resolved = resolve_config(self)
        if resolved.decimal_separator == resolved.thousand_separator:
            raise ValueError(
                f"Decimal and thousand separators both resolve to {resolved.decimal_separator!r}"
            )
        return self

    @property
    def empty(self) -> EmptyValue:
        return EmptyValue.of(self.empty_value)

    @property
    def emits_string(self) -> bool:
        """Whether committed values are emitted as fixed-decimal strings."""
        return str(self.output_type).lower() == "string"

    def with_changes(self, **changes: Any) -> "NumericFieldConfig":
        """
        Return a new configuration with the given props replaced.

        Args:
            **changes: Props by field name or camelCase alias

        Returns:
            NumericFieldConfig: Validated copy

        Raises:
            ValidationError: If the merged props are invalid
        """
        aliases = {
            info.alias: name for name, info in type(self).model_fields.items() if info.alias
        }
        data = self.model_dump()
        for key, value in changes.items():
            data[aliases.get(key, key)] = value
        return type(self).model_validate(data)


# ============================================================================
# Preset Files
# ============================================================================

def load_field_configs(path: Union[str, Path]) -> Dict[str, NumericFieldConfig]:
    """
    Load named input configurations from a JSON preset file.

    The file holds an object mapping preset names to prop objects, optionally
    nested under a top-level "presets" key.

    Args:
        path: Path to the JSON file

    Returns:
        Dict mapping preset names to validated configurations

    Raises:
        ConfigurationError: If the file is missing, malformed or a preset is invalid
    """
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Preset file not found: {file_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in preset file {file_path}: {e}") from e

    if isinstance(data, dict) and "presets" in data:
        data = data["presets"]
    if not isinstance(data, dict):
        raise ConfigurationError(f"Preset file {file_path} must contain an object of presets")

    presets = {}
    for name, props in data.items():
        if not isinstance(props, dict):
            raise ConfigurationError(f"Preset '{name}' must be an object")
        try:
            presets[name] = NumericFieldConfig.model_validate(props)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid preset '{name}': {e}") from e

    logger.info(f"Loaded {len(presets)} input presets from {file_path}")
    return presets


# ============================================================================
# Environment Settings
# ============================================================================

def get_env_variable(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get a MONEYFIELD_-prefixed environment variable value."""
    return os.environ.get(ENV_PREFIX + key, default)


def _env_flag(key: str, default: bool = False) -> bool:
    value = get_env_variable(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(key: str, default: int) -> int:
    value = get_env_variable(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {ENV_PREFIX}{key}={value!r}, using {default}")
        return default


def load_env_file(env_file_path: Optional[Union[str, Path]] = None) -> bool:
    """
    Load environment variables from a .env file.

    Args:
        env_file_path: Optional path to .env file, defaults to ./.env

    Returns:
        True if a file was found and loaded, False otherwise
    """
    target_path = Path(env_file_path) if env_file_path else Path.cwd() / ".env"
    if not target_path.exists():
        logger.debug(f"Environment file not found: {target_path}")
        return False

    load_dotenv(target_path, override=False)
    logger.debug(f"Loaded environment variables from: {target_path}")
    return True


def get_logging_config(env_file_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Build the logging configuration from the environment.

    Recognised variables: MONEYFIELD_LOG_LEVEL, MONEYFIELD_LOG_JSON,
    MONEYFIELD_LOG_SYSTEM_INFO, MONEYFIELD_LOG_FILE and MONEYFIELD_LOG_MAX_MB
    (size in megabytes at which the log file rotates).
    """
    load_env_file(env_file_path)
    return {
        "log_level": (get_env_variable("LOG_LEVEL", "INFO") or "INFO").upper(),
        "enable_json_format": _env_flag("LOG_JSON"),
        "include_system_info": _env_flag("LOG_SYSTEM_INFO"),
        "log_file": get_env_variable("LOG_FILE"),
        "log_max_size_mb": _env_int("LOG_MAX_MB", 10),
    }
