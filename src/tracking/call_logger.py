# src/tracking/call_logger.py — v1
"""Dispatch logging — records every upstream stream the relay opens.

Records are kept in a bounded in-memory ring for introspection and emitted
as structured log entries; nothing is persisted.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from datetime import datetime, timezone

from chatrelay.tracking.models import DispatchRecord, DispatchStatus, ProviderStats

logger = logging.getLogger(__name__)


class DispatchLogger:
    """Accumulates the most recent dispatch records."""

    def __init__(self, max_records: int = 1000) -> None:
        self._records: deque[DispatchRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def record(
        self,
        provider_key: str,
        model: str,
        preference: str,
        status: DispatchStatus,
        latency_ms: int,
        chunks: int = 0,
        chars: int = 0,
        first_delta_ms: int | None = None,
        request_id: str | None = None,
    ) -> DispatchRecord:
        """Record a finished dispatch.

        Args:
            provider_key: Adapter key that served the request.
            model: Upstream model id.
            preference: Client's selection hint ("auto" or a key).
            status: How the stream ended.
            latency_ms: Time from stream open to stream end.
            chunks: Non-empty deltas forwarded downstream.
            chars: Total characters forwarded.
            first_delta_ms: Time to the first non-empty delta, if any.
            request_id: Correlation id of the HTTP request.

        Returns:
            The recorded DispatchRecord.
        """
        record = DispatchRecord(
            dispatch_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            request_id=request_id,
            provider_key=provider_key,
            model=model,
            preference=preference,
            status=status,
            chunks=chunks,
            chars=chars,
            first_delta_ms=first_delta_ms,
            latency_ms=latency_ms,
        )
        with self._lock:
            self._records.append(record)

        level = logging.INFO if status == "completed" else logging.WARNING
        logger.log(
            level,
            "Dispatch %s via %s: %d chunk(s), %d char(s) in %d ms",
            status, provider_key, chunks, chars, latency_ms,
            extra={"data": record.model_dump(mode="json")},
        )
        return record

    @property
    def records(self) -> list[DispatchRecord]:
        """Retained records, oldest first."""
        with self._lock:
            return list(self._records)

    @property
    def total_dispatches(self) -> int:
        with self._lock:
            return len(self._records)

    def by_provider(self) -> dict[str, ProviderStats]:
        """Aggregate retained records per provider key."""
        grouped: dict[str, list[DispatchRecord]] = {}
        for r in self.records:
            grouped.setdefault(r.provider_key, []).append(r)

        stats: dict[str, ProviderStats] = {}
        for key, recs in grouped.items():
            stats[key] = ProviderStats(
                provider_key=key,
                total_dispatches=len(recs),
                completed=sum(1 for r in recs if r.status == "completed"),
                truncated=sum(1 for r in recs if r.status == "truncated"),
                client_disconnected=sum(1 for r in recs if r.status == "client_disconnected"),
                failed=sum(1 for r in recs if r.status == "failed"),
                total_chars=sum(r.chars for r in recs),
                avg_latency_ms=sum(r.latency_ms for r in recs) / len(recs),
            )
        return stats
