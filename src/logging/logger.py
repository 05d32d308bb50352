# src/logging/logger.py — v1
"""Relay logger setup with JSON and text formatters.

Formatters read the request context from record attributes set by
``ContextFilter``; records that never passed the filter format without it.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from chatrelay.logging.handlers import build_handlers

ROOT_LOGGER = "chatrelay"

_CONTEXT_FIELDS = ("request_id", "route", "provider")

# Third-party loggers that log every upstream HTTP call at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    context = {}
    for name in _CONTEXT_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            context[name] = value
    return context


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context, data."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = _record_context(record)
        if context:
            entry["context"] = context

        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable single line, request id and provider when known."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc)
        line = f"{stamp:%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"

        request_id = getattr(record, "request_id", None)
        if request_id:
            line += f" [{request_id}]"
        provider = getattr(record, "provider", None)
        if provider:
            line += f" ({provider})"
        line += f" — {record.getMessage()}"

        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """Configure the ``chatrelay`` logger tree.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Path to log file (None = stdout only).
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    for handler in build_handlers(formatter, log_file, rotation, retention):
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
