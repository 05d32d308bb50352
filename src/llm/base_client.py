# src/llm/base_client.py — v1
"""Abstract LLM client interface.

Every adapter streams a chat completion as a lazy sequence of text deltas:

    stream = await client.chat(messages)   # opens upstream, may raise
    async for delta in stream:             # pulls one delta at a time
        ...

Opening and consuming are separate steps so callers can still report an
error status when the upstream cannot be reached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from chatrelay.core.models import Message
from chatrelay.llm.models import ProviderDescriptor


class BaseLLMClient(ABC):
    """Unified streaming interface for all upstream providers."""

    def __init__(self, descriptor: ProviderDescriptor) -> None:
        self._descriptor = descriptor

    @abstractmethod
    async def chat(self, messages: list[Message]) -> AsyncIterator[str]:
        """Open an upstream completion stream.

        Returns:
            Finite, non-restartable async iterator of text deltas. Deltas
            may be empty strings; the consumer concatenates them.

        Raises:
            UpstreamUnavailableError: If the upstream stream cannot be opened.
        """

    @property
    def descriptor(self) -> ProviderDescriptor:
        return self._descriptor

    @property
    def key(self) -> str:
        """Manual-select key (e.g. "kimi")."""
        return self._descriptor.key

    @property
    def name(self) -> str:
        """Display name."""
        return self._descriptor.name

    @property
    def model(self) -> str:
        return self._descriptor.model

    @property
    def accepts_images(self) -> bool:
        """Whether this provider/model accepts image parts."""
        return self._descriptor.accepts_images

    @property
    def provider_name(self) -> str:
        """Upstream family identifier (groq, cerebras, openai)."""
        return self._descriptor.provider

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, model={self.model!r})"
