# tests/unit/llm/test_unit_config.py — v1
"""Tests for llm/config.py — provider roster resolution."""

from __future__ import annotations

from chatrelay.config.settings import Settings
from chatrelay.llm.config import AUTO, build_descriptors


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestBuildDescriptors:
    def test_boot_order(self):
        keys = [d.key for d in build_descriptors(_settings())]
        assert keys == ["kimi", "reasoning", "cerebras", "vision"]

    def test_vision_disabled(self):
        keys = [d.key for d in build_descriptors(_settings(vision_enabled=False))]
        assert keys == ["kimi", "reasoning", "cerebras"]

    def test_rotation_excludes_vision(self):
        roster = build_descriptors(_settings())
        assert [d.key for d in roster if d.in_rotation] == ["kimi", "reasoning", "cerebras"]
        vision = roster[-1]
        assert vision.accepts_images is True
        assert vision.kind == "vision"

    def test_sampling_parameters(self):
        by_key = {d.key: d for d in build_descriptors(_settings())}
        assert by_key["kimi"].params.temperature == 0.6
        assert by_key["kimi"].params.max_tokens == 4096
        assert by_key["reasoning"].params.temperature == 1.0
        assert by_key["reasoning"].params.max_tokens == 8192
        assert by_key["cerebras"].params.top_p == 0.95
        assert by_key["cerebras"].params.max_tokens == 8192

    def test_reasoning_effort_only_on_reasoning(self):
        by_key = {d.key: d for d in build_descriptors(_settings(llm_reasoning_effort="high"))}
        assert by_key["reasoning"].params.reasoning_effort == "high"
        assert by_key["kimi"].params.reasoning_effort is None
        assert by_key["cerebras"].params.reasoning_effort is None

    def test_credentials_and_urls(self):
        s = _settings(groq_api_key="gsk", cerebras_api_key="csk",
                      cerebras_base_url="http://localhost:9000/v1")
        by_key = {d.key: d for d in build_descriptors(s)}
        assert by_key["kimi"].api_key == "gsk"
        assert by_key["reasoning"].provider == "groq"
        assert by_key["cerebras"].api_key == "csk"
        assert by_key["cerebras"].base_url == "http://localhost:9000/v1"

    def test_model_override(self):
        s = _settings(llm_kimi_model="custom-model")
        assert build_descriptors(s)[0].model == "custom-model"

    def test_auto_constant(self):
        assert AUTO == "auto"
