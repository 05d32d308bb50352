# src/llm/models.py — v1
"""LLM-specific types: SamplingParams, ProviderDescriptor."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AdapterKind = Literal["chat", "reasoning", "vision"]


class SamplingParams(BaseModel):
    """Generation parameters sent with every upstream request."""

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.6
    top_p: float = 1.0
    max_tokens: int = 4096
    reasoning_effort: Literal["low", "medium", "high"] | None = None


class ProviderDescriptor(BaseModel):
    """Immutable description of one upstream provider + model."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    kind: AdapterKind = "chat"
    provider: str
    base_url: str
    api_key: str = Field(default="", repr=False)
    model: str
    params: SamplingParams = Field(default_factory=SamplingParams)
    accepts_images: bool = False
    in_rotation: bool = True
