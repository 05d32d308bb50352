# src/pipeline/chat_service.py — v1
"""Chat service — everything that happens before the first streamed byte.

    ChatRequest
      → AttachmentProcessor.process_all   (concurrent, upload order kept)
      → assemble                          (parts merged into last user turn)
      → ProviderRegistry.pick[_for_images]
      → adapter.chat                      (upstream stream opened)
      → Dispatch

Any error raised here can still be reported with an HTTP status; once a
Dispatch is returned the caller owns the stream and must close it.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from chatrelay.core.models import ChatRequest, Message
from chatrelay.extraction.attachment_processor import AttachmentProcessor
from chatrelay.llm.base_client import BaseLLMClient
from chatrelay.llm.registry import ProviderRegistry
from chatrelay.logging.context import set_provider_context
from chatrelay.pipeline.assembler import assemble, requires_images

logger = logging.getLogger(__name__)


@dataclass
class Dispatch:
    """An opened upstream stream and what produced it."""

    adapter: BaseLLMClient
    stream: AsyncIterator[str]
    preference: str
    messages: list[Message]
    released: bool = field(default=False, repr=False)


class ChatService:
    """Drive attachment processing, assembly, routing and upstream open."""

    def __init__(
        self,
        registry: ProviderRegistry,
        processor: AttachmentProcessor | None = None,
    ) -> None:
        self._registry = registry
        self._processor = processor or AttachmentProcessor()

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    async def open(self, request: ChatRequest) -> Dispatch:
        """Prepare the conversation and open exactly one upstream stream.

        Raises:
            MalformedRequestError: If attachments arrive without a final user turn.
            UpstreamUnavailableError: If the selected adapter cannot open its stream.
        """
        parts = await self._processor.process_all(request.files)
        messages = assemble(request.messages, parts)

        adapter = self.route(messages, request.model)
        set_provider_context(adapter.key)
        logger.info("Using %s service (preference: %s)", adapter.name, request.model)

        stream = await adapter.chat(messages)
        return Dispatch(
            adapter=adapter,
            stream=stream,
            preference=request.model,
            messages=messages,
        )

    def route(self, messages: list[Message], preference: str) -> BaseLLMClient:
        """Choose the adapter: image-capable when images are present."""
        if requires_images(messages):
            return self._registry.pick_for_images(preference)
        return self._registry.pick(preference)
