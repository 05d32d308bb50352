# src/api/routes.py — v1
"""Chat endpoint: ``/chat`` (local) and ``/api/chat`` (edge), same semantics.

POST streams the completion as chunked ``text/plain``; OPTIONS answers the
CORS preflight; every other method gets a 405 JSON body.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from chatrelay.api.request_parser import parse_chat_request
from chatrelay.api.transport import (
    CORS_HEADERS,
    RelayStreamingResponse,
    json_error,
    method_not_allowed,
)
from chatrelay.core.errors import RelayError
from chatrelay.logging.context import set_request_context
from chatrelay.pipeline.chat_service import ChatService

logger = logging.getLogger(__name__)

CHAT_PATHS = ("/chat", "/api/chat")
_OTHER_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE"]

router = APIRouter(tags=["chat"])


async def chat(request: Request) -> Response:
    """Relay one conversation to an upstream provider and stream the reply."""
    set_request_context(request.url.path)
    state = request.app.state
    service: ChatService = state.chat_service

    try:
        chat_request = await parse_chat_request(request, state.settings)
        dispatch = await service.open(chat_request)
    except RelayError as exc:
        level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(level, "Chat request rejected (%d): %s", exc.status_code, exc.message)
        return json_error(exc)
    except Exception as exc:
        logger.exception("Error in %s endpoint", request.url.path)
        return json_error(RelayError(str(exc)))

    return RelayStreamingResponse(dispatch, state.dispatch_logger)


async def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


async def not_allowed() -> Response:
    return method_not_allowed()


for _path in CHAT_PATHS:
    router.add_api_route(_path, chat, methods=["POST"], include_in_schema=True)
    router.add_api_route(_path, preflight, methods=["OPTIONS"], include_in_schema=False)
    router.add_api_route(_path, not_allowed, methods=_OTHER_METHODS, include_in_schema=False)
