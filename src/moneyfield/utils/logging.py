"""
Logging infrastructure for moneyfield inputs.

This module provides structured JSON logging with a human-readable text fallback,
category tagging and correlation ID tracking for the value engine, the
synchronization controller and the widget layer.

Features:
- Structured JSON logging with human-readable text fallback
- Correlation ID tracking with category-specific prefixes
- Optional process information (memory, threads) via psutil
- Environment driven configuration of the package logger

Author: Moneyfield Development Team
Version: 1.0.0
"""

import os
import sys
import json
import uuid
import threading
import traceback
import logging
import logging.handlers
from datetime import datetime
from enum import Enum
from contextlib import contextmanager
from logging import LogRecord
from typing import Dict, Any, Optional

import psutil

PACKAGE_LOGGER = "moneyfield"

DEFAULT_LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 7


class LogCategory(Enum):
    """Component-specific logging categories."""
    APPLICATION = "application"
    VALUE_ENGINE = "value_engine"
    SYNC_CONTROLLER = "sync"
    CONFIGURATION = "config"
    GUI = "gui"


class CorrelationIdGenerator:
    """Correlation ID generator with category-specific prefixes."""

    _prefixes = {
        LogCategory.APPLICATION: "app",
        LogCategory.VALUE_ENGINE: "engine",
        LogCategory.SYNC_CONTROLLER: "sync",
        LogCategory.CONFIGURATION: "cfg",
        LogCategory.GUI: "gui_op",
    }

    @classmethod
    def generate(cls, category: LogCategory) -> str:
        """Return an ID such as sync_20240101_120000_1a2b3c4d."""
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{cls._prefixes.get(category, 'general')}_{stamp}_{uuid.uuid4().hex[:8]}"


_local = threading.local()


@contextmanager
def correlation_context(category: LogCategory, custom_id: Optional[str] = None):
    """
    Context manager for correlation ID tracking.

    Usage:
        with correlation_context(LogCategory.SYNC_CONTROLLER):
            logger.info("Commit started")
    """
    correlation_id = custom_id or CorrelationIdGenerator.generate(category)
    previous = getattr(_local, "correlation_id", None)
    _local.correlation_id = correlation_id
    try:
        yield correlation_id
    finally:
        _local.correlation_id = previous


def current_correlation_id() -> Optional[str]:
    """Get current correlation ID from thread-local storage."""
    return getattr(_local, "correlation_id", None)


class CorrelationFilter(logging.Filter):
    """Attaches the active correlation ID to records that carry none."""

    def filter(self, record: LogRecord) -> bool:
        if getattr(record, "correlation_id", None) is None:
            record.correlation_id = current_correlation_id()
        return True


class StructuredFormatter(logging.Formatter):
    """
    Formats records as one JSON object per line, or as bracketed text.

    Both renderings carry the record's category (``extra={"category": ...}``),
    its correlation ID and its ``context`` mapping when present.
    """

    TEXT_TIMESTAMP = "%Y-%m-%d %H:%M:%S.%f"

    def __init__(self, use_json: bool = True, include_system_info: bool = False):
        super().__init__()
        self.use_json = use_json
        self.include_system_info = include_system_info

    @staticmethod
    def _process_info() -> Dict[str, Any]:
        info = {"process_id": os.getpid(), "thread_id": threading.get_ident()}
        try:
            process = psutil.Process()
            info["memory_mb"] = round(process.memory_info().rss / (1024 * 1024), 2)
            info["thread_count"] = process.num_threads()
        except psutil.Error:
            pass
        return info

    def _fields(self, record: LogRecord) -> Dict[str, Any]:
        fields = {
            "timestamp": datetime.fromtimestamp(record.created),
            "level": record.levelname,
            "component": getattr(record, "category", None) or LogCategory.APPLICATION.value,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            fields["correlation_id"] = correlation_id
        context = getattr(record, "context", None)
        if context:
            fields["context"] = dict(context)
        return fields

    def format(self, record: LogRecord) -> str:
        fields = self._fields(record)
        if self.use_json:
            return self._to_json(record, fields)
        return self._to_text(record, fields)

    def _to_json(self, record: LogRecord, fields: Dict[str, Any]) -> str:
        fields["timestamp"] = fields["timestamp"].isoformat()
        fields.update(logger_name=record.name, module=record.module,
                      function=record.funcName, line=record.lineno)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            fields["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }
        if self.include_system_info:
            fields["system"] = self._process_info()

        return json.dumps(fields, default=str, ensure_ascii=False)

    def _to_text(self, record: LogRecord, fields: Dict[str, Any]) -> str:
        stamp = fields["timestamp"].strftime(self.TEXT_TIMESTAMP)[:-3]
        line = f"[{stamp}] [{fields['level']:8}] [{fields['component']}]"
        if "correlation_id" in fields:
            line += f" [{fields['correlation_id']}]"
        line += f" {fields['message']}"

        if "context" in fields:
            pairs = " ".join(f"{key}={value}" for key, value in fields["context"].items())
            line += f" ({pairs})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        config: Logging settings as returned by get_logging_config(); read
            from the environment when omitted

    Returns:
        logging.Logger: The configured "moneyfield" logger
    """
    if config is None:
        from moneyfield.utils.config import get_logging_config
        config = get_logging_config()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, config.get("log_level", "INFO"), logging.INFO))

    # Replace handlers installed by a previous call
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter(
        use_json=config.get("enable_json_format", False),
        include_system_info=config.get("include_system_info", False),
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(CorrelationFilter())
    package_logger.addHandler(console_handler)

    log_file = config.get("log_file")
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=int(config.get("log_max_size_mb", DEFAULT_LOG_MAX_SIZE_MB)) * 1024 * 1024,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter(use_json=True, include_system_info=False))
        file_handler.addFilter(CorrelationFilter())
        package_logger.addHandler(file_handler)

    return package_logger


__all__ = [
    "PACKAGE_LOGGER",
    "DEFAULT_LOG_MAX_SIZE_MB",
    "LOG_BACKUP_COUNT",
    "LogCategory",
    "CorrelationIdGenerator",
    "CorrelationFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_context",
    "current_correlation_id",
]
