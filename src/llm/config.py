# src/llm/config.py — v1
"""Provider roster resolution from settings.

The roster order is the boot order of the registry and therefore the
round-robin order for automatic selection:
  1. kimi       (Groq, general chat)
  2. reasoning  (Groq, reasoning model)
  3. cerebras   (Cerebras, general chat)
  4. vision     (Groq, image-capable; outside the rotation, optional)
"""

from __future__ import annotations

from chatrelay.config.settings import Settings
from chatrelay.llm.models import ProviderDescriptor, SamplingParams

AUTO = "auto"


def build_descriptors(settings: Settings) -> list[ProviderDescriptor]:
    """Build the ordered provider roster.

    Args:
        settings: Application settings (credentials, base URLs, models).

    Returns:
        Descriptors in registry boot order.
    """
    roster = [
        ProviderDescriptor(
            key="kimi",
            name="Groq (Kimi)",
            kind="chat",
            provider="groq",
            base_url=settings.groq_base_url,
            api_key=settings.groq_api_key,
            model=settings.llm_kimi_model,
            params=SamplingParams(temperature=0.6, top_p=1.0, max_tokens=4096),
        ),
        ProviderDescriptor(
            key="reasoning",
            name="Groq (Reasoning)",
            kind="reasoning",
            provider="groq",
            base_url=settings.groq_base_url,
            api_key=settings.groq_api_key,
            model=settings.llm_reasoning_model,
            params=SamplingParams(
                temperature=1.0,
                top_p=1.0,
                max_tokens=8192,
                reasoning_effort=settings.llm_reasoning_effort,
            ),
        ),
        ProviderDescriptor(
            key="cerebras",
            name="Cerebras",
            kind="chat",
            provider="cerebras",
            base_url=settings.cerebras_base_url,
            api_key=settings.cerebras_api_key,
            model=settings.llm_cerebras_model,
            params=SamplingParams(temperature=0.6, top_p=0.95, max_tokens=8192),
        ),
    ]

    if settings.vision_enabled:
        roster.append(
            ProviderDescriptor(
                key="vision",
                name="Groq (Vision)",
                kind="vision",
                provider="groq",
                base_url=settings.groq_base_url,
                api_key=settings.groq_api_key,
                model=settings.llm_vision_model,
                params=SamplingParams(temperature=0.7, top_p=1.0, max_tokens=4096),
                accepts_images=True,
                in_rotation=False,
            )
        )

    return roster
