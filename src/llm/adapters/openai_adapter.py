# src/llm/adapters/openai_adapter.py — v1
"""OpenAI-compatible streaming adapter implementing BaseLLMClient.

Uses the official openai SDK pointed at the descriptor's base URL, which
covers Groq, Cerebras and OpenAI itself. Chat, reasoning and vision
variants share this class; they differ only by descriptor defaults.
"""

from __future__ import annotations

import logging
from typing import Any

from chatrelay.core.errors import UpstreamUnavailableError
from chatrelay.core.models import Message
from chatrelay.llm.base_client import BaseLLMClient
from chatrelay.llm.models import ProviderDescriptor

logger = logging.getLogger(__name__)


class CompletionDeltas:
    """Async iterator over the text deltas of one streaming completion.

    Ends normally when the upstream finishes or drops mid-stream (then
    ``truncated`` is set). The underlying HTTP stream is closed on every
    exit path, including an explicit ``aclose()`` from the consumer.
    """

    def __init__(self, stream: Any, source: str) -> None:
        self._stream = stream
        self._source = source
        self._iterator: Any = None
        self._closed = False
        self.truncated = False

    def __aiter__(self) -> CompletionDeltas:
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration
        if self._iterator is None:
            self._iterator = self._stream.__aiter__()
        try:
            chunk = await self._iterator.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        except Exception as exc:
            self.truncated = True
            logger.warning("Upstream %s truncated mid-stream: %s", self._source, exc)
            await self.aclose()
            raise StopAsyncIteration from exc
        return _delta_text(chunk)

    async def aclose(self) -> None:
        """Release the upstream stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        close = getattr(self._stream, "close", None)
        if close is None:
            return
        try:
            await close()
        except Exception:
            logger.debug("Error closing upstream stream for %s", self._source, exc_info=True)


class OpenAICompatibleAdapter(BaseLLMClient):
    """Adapter for any OpenAI-compatible chat-completions endpoint."""

    def __init__(self, descriptor: ProviderDescriptor, client: Any = None) -> None:
        super().__init__(descriptor)
        self.__client = client  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init AsyncOpenAI client (only on first API call)."""
        if self.__client is None:
            try:
                import openai
            except ImportError as e:
                raise ImportError("openai package required: pip install openai") from e
            self.__client = openai.AsyncOpenAI(
                api_key=self._descriptor.api_key,
                base_url=self._descriptor.base_url,
            )
        return self.__client

    async def chat(self, messages: list[Message]) -> CompletionDeltas:
        """Open a streaming chat completion against the upstream."""
        kwargs = self._build_kwargs(messages)
        logger.info(
            "Opening %s stream: model=%s, messages=%d",
            self.name, self.model, len(messages),
        )
        try:
            stream = await self._client.chat.completions.create(**kwargs)
        except Exception as exc:
            logger.error("Upstream %s unavailable: %s", self.name, exc)
            raise UpstreamUnavailableError(f"{self.name}: {exc}", provider=self.key) from exc
        return CompletionDeltas(stream, source=self.name)

    def _build_kwargs(self, messages: list[Message]) -> dict[str, Any]:
        """Build chat.completions.create() keyword arguments."""
        params = self._descriptor.params
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [self._to_wire(m) for m in messages],
            "temperature": params.temperature,
            "top_p": params.top_p,
            "max_completion_tokens": params.max_tokens,
            "stream": True,
        }
        if self._descriptor.kind == "reasoning" and params.reasoning_effort:
            kwargs["reasoning_effort"] = params.reasoning_effort
        return kwargs

    def _to_wire(self, message: Message) -> dict[str, Any]:
        """Serialize a message, flattening structured content for text-only models."""
        if isinstance(message.content, str) or self.accepts_images:
            return message.model_dump(mode="json")

        if message.has_images:
            dropped = sum(1 for p in message.content if p.type == "image_url")
            logger.warning(
                "%s does not accept images: dropping %d image part(s)", self.name, dropped,
            )
        text = "\n\n".join(t for t in message.text_parts() if t)
        return {"role": message.role, "content": text}


def _delta_text(chunk: Any) -> str:
    """Extract the text delta from a ChatCompletionChunk ("" when absent)."""
    choices = getattr(chunk, "choices", None)
    if not choices:
        return ""
    delta = getattr(choices[0], "delta", None)
    if delta is None:
        return ""
    return getattr(delta, "content", None) or ""
