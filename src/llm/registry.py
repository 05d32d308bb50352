# src/llm/registry.py — v1
"""Provider registry and round-robin rotator.

Adapters are held in boot order. ``pick("auto")`` hands out the adapter at
the cursor and advances it by one; a known key selects that adapter
directly and leaves the cursor alone. The cursor is the only mutable
shared state in the relay and is advanced under a lock, so concurrent
auto-picks never observe the same value.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from chatrelay.llm.base_client import BaseLLMClient
from chatrelay.llm.config import AUTO

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Ordered adapter set with an atomic rotation cursor."""

    def __init__(self, adapters: list[BaseLLMClient]) -> None:
        if not adapters:
            raise ValueError("ProviderRegistry requires at least one adapter")
        keys = [a.key for a in adapters]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Duplicate adapter keys: {keys}")

        self._adapters = list(adapters)
        self._by_key = {a.key: a for a in self._adapters}
        rotation = [a for a in self._adapters if a.descriptor.in_rotation]
        self._rotation = rotation or list(self._adapters)
        self._cursor = 0
        self._lock = threading.Lock()

    # --- Selection ---

    def pick(self, preference: str = AUTO) -> BaseLLMClient:
        """Select an adapter for a request.

        Args:
            preference: An adapter key, or "auto". Unknown keys behave as "auto".

        Returns:
            The selected adapter.
        """
        adapter = self._by_key.get(preference) if preference != AUTO else None
        if adapter is not None:
            logger.debug("Manual selection: %s", adapter.key)
            return adapter
        return self._next()

    def pick_for_images(self, preference: str = AUTO) -> BaseLLMClient:
        """Select an image-capable adapter, falling back to ``pick``.

        A manually preferred adapter wins when it accepts images itself.
        """
        preferred = self._by_key.get(preference)
        if preferred is not None and preferred.accepts_images:
            return preferred
        for adapter in self._adapters:
            if adapter.accepts_images:
                return adapter
        logger.info("No image-capable adapter configured; routing as text")
        return self.pick(preference)

    def _next(self) -> BaseLLMClient:
        with self._lock:
            adapter = self._rotation[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._rotation)
        logger.debug("Rotation selection: %s", adapter.key)
        return adapter

    # --- Introspection ---

    def get(self, key: str) -> BaseLLMClient | None:
        return self._by_key.get(key)

    @property
    def cursor(self) -> int:
        """Index into the rotation of the adapter the next auto-pick returns."""
        with self._lock:
            return self._cursor

    @property
    def keys(self) -> list[str]:
        return [a.key for a in self._adapters]

    @property
    def rotation(self) -> list[BaseLLMClient]:
        return list(self._rotation)

    @property
    def has_image_adapter(self) -> bool:
        return any(a.accepts_images for a in self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)

    def __iter__(self) -> Iterator[BaseLLMClient]:
        return iter(self._adapters)
