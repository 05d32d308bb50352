# tests/unit/llm/test_models.py — v1
"""Tests for llm/models.py — SamplingParams and ProviderDescriptor."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from chatrelay.llm.models import ProviderDescriptor, SamplingParams


class TestSamplingParams:
    def test_defaults(self):
        p = SamplingParams()
        assert p.temperature == 0.6
        assert p.top_p == 1.0
        assert p.max_tokens == 4096
        assert p.reasoning_effort is None

    def test_frozen(self):
        p = SamplingParams()
        with pytest.raises(ValidationError):
            p.temperature = 1.0

    def test_invalid_effort(self):
        with pytest.raises(ValidationError):
            SamplingParams(reasoning_effort="extreme")


class TestProviderDescriptor:
    def test_defaults(self):
        d = ProviderDescriptor(
            key="kimi", name="Groq (Kimi)", provider="groq",
            base_url="https://api.groq.com/openai/v1", model="m",
        )
        assert d.kind == "chat"
        assert d.accepts_images is False
        assert d.in_rotation is True
        assert d.api_key == ""

    def test_api_key_hidden_from_repr(self):
        d = ProviderDescriptor(
            key="kimi", name="n", provider="groq",
            base_url="u", model="m", api_key="secret-123",
        )
        assert "secret-123" not in repr(d)

    def test_invalid_kind(self):
        with pytest.raises(ValidationError):
            ProviderDescriptor(key="x", name="n", kind="embedding",
                               provider="groq", base_url="u", model="m")
