# src/api/transport.py — v1
"""CORS headers, error responses and the streaming relay body.

The relay pulls one upstream delta per downstream write, so a slow client
slows the upstream reads instead of buffering. Whatever ends the body
(upstream completion, upstream drop, client disconnect or a late error), the
upstream stream is closed and one dispatch record is written.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

from fastapi.responses import JSONResponse, StreamingResponse

from chatrelay.api.models import ErrorBody
from chatrelay.core.errors import RelayError
from chatrelay.logging.context import get_context
from chatrelay.pipeline.chat_service import Dispatch
from chatrelay.tracking.call_logger import DispatchLogger
from chatrelay.tracking.models import DispatchStatus

logger = logging.getLogger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"

STREAM_HEADERS: dict[str, str] = {
    **CORS_HEADERS,
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


def json_error(exc: RelayError) -> JSONResponse:
    """Render a relay error as ``{error, message}`` with CORS headers."""
    body = ErrorBody(error=exc.error, message=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=CORS_HEADERS,
    )


def method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=405,
        content={"error": "Method not allowed"},
        headers={**CORS_HEADERS, "Allow": "POST, OPTIONS"},
    )


class RelayStreamingResponse(StreamingResponse):
    """Streams a dispatch and releases it on every exit path.

    The relay generator only runs its cleanup once it has started. When the
    ASGI send fails before the first chunk (client already gone), the
    generator never starts, so the upstream is released here instead.
    """

    def __init__(
        self,
        dispatch: Dispatch,
        dispatch_logger: DispatchLogger | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("media_type", STREAM_MEDIA_TYPE)
        kwargs.setdefault("headers", STREAM_HEADERS)
        self.dispatch = dispatch
        self.dispatch_logger = dispatch_logger
        super().__init__(relay(dispatch, dispatch_logger), **kwargs)

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.body_iterator.aclose()
            await release(self.dispatch, self.dispatch_logger)


async def release(
    dispatch: Dispatch,
    dispatch_logger: DispatchLogger | None = None,
    *,
    status: DispatchStatus = "client_disconnected",
    latency_ms: int = 0,
    chunks: int = 0,
    chars: int = 0,
    first_delta_ms: int | None = None,
) -> None:
    """Close the upstream stream and write the dispatch record, once."""
    if dispatch.released:
        return
    dispatch.released = True
    adapter = dispatch.adapter

    aclose = getattr(dispatch.stream, "aclose", None)
    if aclose is not None:
        try:
            await aclose()
        except Exception:
            logger.debug("Error releasing upstream %s", adapter.key, exc_info=True)
    if dispatch_logger is not None:
        dispatch_logger.record(
            provider_key=adapter.key,
            model=adapter.model,
            preference=dispatch.preference,
            status=status,
            latency_ms=latency_ms,
            chunks=chunks,
            chars=chars,
            first_delta_ms=first_delta_ms,
            request_id=get_context().request_id,
        )


async def relay(
    dispatch: Dispatch,
    dispatch_logger: DispatchLogger | None = None,
) -> AsyncIterator[str]:
    """Forward upstream deltas downstream in arrival order.

    Empty deltas are skipped. Errors raised after streaming began are logged
    and end the body silently; the status line has already been sent.
    """
    stream = dispatch.stream
    adapter = dispatch.adapter
    start = time.monotonic()
    chunks = 0
    chars = 0
    first_delta_ms: int | None = None
    status: DispatchStatus = "completed"

    try:
        async for delta in stream:
            if not delta:
                continue
            if first_delta_ms is None:
                first_delta_ms = int((time.monotonic() - start) * 1000)
            chunks += 1
            chars += len(delta)
            yield delta
        if getattr(stream, "truncated", False):
            status = "truncated"
    except (asyncio.CancelledError, GeneratorExit):
        status = "client_disconnected"
        logger.info("Client disconnected; releasing upstream %s", adapter.key)
        raise
    except Exception:
        status = "failed"
        logger.exception("Stream from %s failed after streaming began", adapter.key)
    finally:
        await release(
            dispatch,
            dispatch_logger,
            status=status,
            latency_ms=int((time.monotonic() - start) * 1000),
            chunks=chunks,
            chars=chars,
            first_delta_ms=first_delta_ms,
        )
