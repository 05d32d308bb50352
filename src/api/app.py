# src/api/app.py — v1
"""FastAPI application factory.

Usage:
    uvicorn chatrelay.api.app:create_app --factory --port 3000

The registry (and with it the rotation cursor), the chat service and the
dispatch logger are owned by the app instance and live in ``app.state``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatrelay.api.routes import CHAT_PATHS, router as chat_router
from chatrelay.api.transport import method_not_allowed
from chatrelay.config.settings import Settings, load_settings
from chatrelay.extraction.attachment_processor import AttachmentProcessor
from chatrelay.llm.client_factory import create_llm_clients
from chatrelay.llm.config import build_descriptors
from chatrelay.llm.registry import ProviderRegistry
from chatrelay.pipeline.chat_service import ChatService
from chatrelay.tracking.call_logger import DispatchLogger
from chatrelay.version import __version__

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    registry: ProviderRegistry | None = None,
    dispatch_logger: DispatchLogger | None = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        settings: Application settings. Loaded from .env if None.
        registry: Provider registry. Built from the settings roster if None.
        dispatch_logger: Dispatch record sink. A fresh one if None.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or load_settings()
    if registry is None:
        registry = ProviderRegistry(create_llm_clients(build_descriptors(settings)))

    app = FastAPI(
        title="chatrelay",
        version=__version__,
        description="Streaming chat relay across OpenAI-compatible LLM providers",
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.dispatch_logger = dispatch_logger or DispatchLogger()
    app.state.chat_service = ChatService(
        registry,
        AttachmentProcessor(text_limit=settings.attachment_text_limit),
    )

    app.include_router(chat_router)
    app.add_exception_handler(StarletteHTTPException, _chat_http_error)

    static_dir = settings.static_dir
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
        logger.info("Serving static assets from %s", static_dir)

    logger.info(
        "Relay ready: %d provider(s) [%s], rotation [%s]",
        len(registry),
        ", ".join(registry.keys),
        ", ".join(a.key for a in registry.rotation),
    )
    return app


async def _chat_http_error(request: Request, exc: StarletteHTTPException):
    """Any method the chat paths do not route gets the relay's 405 body."""
    if exc.status_code == 405 and request.url.path in CHAT_PATHS:
        return method_not_allowed()
    return await http_exception_handler(request, exc)
