# src/tracking/models.py — v1
"""Tracking domain models: DispatchRecord, ProviderStats."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

DispatchStatus = Literal["completed", "truncated", "client_disconnected", "failed"]


class DispatchRecord(BaseModel):
    """One upstream dispatch and how its stream ended."""

    dispatch_id: str
    timestamp: datetime
    request_id: str | None = None
    provider_key: str
    model: str
    preference: str
    status: DispatchStatus
    chunks: int = 0
    chars: int = 0
    first_delta_ms: int | None = None
    latency_ms: int


class ProviderStats(BaseModel):
    """Per-provider aggregate over the retained dispatch records."""

    provider_key: str
    total_dispatches: int
    completed: int = 0
    truncated: int = 0
    client_disconnected: int = 0
    failed: int = 0
    total_chars: int = 0
    avg_latency_ms: float = 0.0
