# src/llm/client_factory.py — v1
"""Factory: instantiate LLM clients from provider descriptors.

Called at boot to turn the configured roster into live adapters.
"""

from __future__ import annotations

import importlib
import logging

from chatrelay.llm.base_client import BaseLLMClient
from chatrelay.llm.models import ProviderDescriptor

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "groq": "chatrelay.llm.adapters.openai_adapter.OpenAICompatibleAdapter",
    "cerebras": "chatrelay.llm.adapters.openai_adapter.OpenAICompatibleAdapter",
    "openai": "chatrelay.llm.adapters.openai_adapter.OpenAICompatibleAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(descriptor: ProviderDescriptor, **kwargs: object) -> BaseLLMClient:
    """Instantiate the correct adapter for a descriptor.

    Args:
        descriptor: Immutable provider + model description.
        **kwargs: Additional adapter-specific arguments (e.g. a prebuilt SDK client).

    Returns:
        Configured BaseLLMClient instance.

    Raises:
        UnsupportedProviderError: If the descriptor's provider is not registered.
    """
    provider = descriptor.provider
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    logger.debug(
        "Creating LLM client: key=%s, provider=%s, model=%s",
        descriptor.key, provider, descriptor.model,
    )
    return adapter_cls(descriptor, **kwargs)


def create_llm_clients(descriptors: list[ProviderDescriptor]) -> list[BaseLLMClient]:
    """Instantiate adapters for a whole roster, preserving order."""
    return [create_llm_client(d) for d in descriptors]


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
