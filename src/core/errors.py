# src/core/errors.py — v1
"""Relay error taxonomy.

Each error carries the short ``error`` label and HTTP status the endpoint
reports when it is raised before streaming starts.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for errors the chat endpoint knows how to report."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.error
        super().__init__(self.message)


class MalformedRequestError(RelayError):
    """Missing or invalid ``messages``, non-user final turn, unparsable JSON."""

    status_code = 400
    error = "Invalid messages format"


class UnsupportedMediaError(RelayError):
    """Upload rejected at the HTTP boundary (type, size or count)."""

    status_code = 400
    error = "Unsupported upload"

    def __init__(self, message: str = "", filename: str | None = None) -> None:
        self.filename = filename
        super().__init__(message)


class ExtractionError(RelayError):
    """A single attachment could not be converted. Never fatal to the request."""

    status_code = 500
    error = "Extraction failed"


class UpstreamUnavailableError(RelayError):
    """The upstream provider stream could not be opened."""

    status_code = 500
    error = "Upstream unavailable"

    def __init__(self, message: str = "", provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)
