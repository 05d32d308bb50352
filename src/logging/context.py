# src/logging/context.py — v1
"""Contextual logging support — attach request_id, route, provider to log records.

Each HTTP request runs in its own asyncio task, which copies the context on
creation, so values set here never leak between concurrent requests.
"""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass
from typing import Any

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_route: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "route", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    route: str | None = None
    provider: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        route=_route.get(),
        provider=_provider.get(),
    )


def set_request_context(route: str, request_id: str | None = None) -> str:
    """Set request-level context. Returns the (possibly generated) request id."""
    rid = request_id or uuid.uuid4().hex[:12]
    _request_id.set(rid)
    _route.set(route)
    _provider.set(None)
    return rid


def set_provider_context(provider: str) -> None:
    """Record which adapter serves the current request."""
    _provider.set(provider)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _route.set(None)
    _provider.set(None)
