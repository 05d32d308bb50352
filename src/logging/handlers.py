# src/logging/handlers.py — v1
"""Handlers for the relay logger: stdout plus an optional rotating file.

Every handler built here carries a ContextFilter, so records are stamped
with the request context of the task that emitted them.
"""

from __future__ import annotations

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from chatrelay.logging.context import get_context

_SIZE_RE = re.compile(r"^(\d+)\s*(KB|MB|GB)$", re.IGNORECASE)
_MULTIPLIERS = {"KB": 1024, "MB": 1024**2, "GB": 1024**3}


class ContextFilter(logging.Filter):
    """Copy request_id, route and provider from contextvars onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_context()
        record.request_id = ctx.request_id
        record.route = ctx.route
        record.provider = ctx.provider
        return True


def parse_size(size_str: str) -> int:
    """Parse a size like '10MB' into bytes (KB, MB, GB; case-insensitive)."""
    match = _SIZE_RE.match(size_str.strip())
    if not match:
        raise ValueError(f"Invalid size format: {size_str!r}. Use e.g. '10MB'.")
    return int(match.group(1)) * _MULTIPLIERS[match.group(2).upper()]


def create_rotating_handler(
    log_file: str | Path,
    rotation: str = "10MB",
    retention: int = 30,
) -> RotatingFileHandler:
    """Create a size-based rotating file handler.

    Args:
        log_file: Path to log file (``~`` is expanded, parents are created).
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of backup files to keep.

    Returns:
        Configured RotatingFileHandler.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(path),
        maxBytes=parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
    )


def build_handlers(
    formatter: logging.Formatter,
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> list[logging.Handler]:
    """Console handler, plus a rotating file handler when log_file is set."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(create_rotating_handler(log_file, rotation, retention))

    context_filter = ContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
    return handlers
