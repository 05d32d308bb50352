# src/api/models.py — v1
"""Public API types: wire-level error body."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorBody(BaseModel):
    """JSON body returned for any failure before streaming starts."""

    error: str
    message: str | None = None
