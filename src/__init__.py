# src/__init__.py — v1
"""chatrelay — streaming chat relay for OpenAI-compatible LLM providers."""

from chatrelay.version import __version__

__all__ = ["__version__"]
