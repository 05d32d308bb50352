# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides fake streaming adapters, a three-provider registry, settings that
ignore any local .env, and an HTTP test client over the real app.
No external dependencies — upstream providers are never contacted.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from chatrelay.api.app import create_app
from chatrelay.config.settings import Settings
from chatrelay.core.models import Message, UploadedFile
from chatrelay.llm.registry import ProviderRegistry
from chatrelay.tracking.call_logger import DispatchLogger
from tests.fakes import FakeAdapter, make_descriptor, make_vision_descriptor


# === FIXTURES: Settings and registry ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any local .env; no static directory."""
    return Settings(_env_file=None, static_dir=tmp_path / "no-public")


@pytest.fixture
def fake_adapters() -> list[FakeAdapter]:
    """Three text-only adapters A, B, C, each streaming "x"."""
    return [FakeAdapter(make_descriptor(k)) for k in ("a", "b", "c")]


@pytest.fixture
def vision_adapter() -> FakeAdapter:
    return FakeAdapter(make_vision_descriptor(), deltas=["seen"])


@pytest.fixture
def registry(fake_adapters: list[FakeAdapter]) -> ProviderRegistry:
    return ProviderRegistry(fake_adapters)


@pytest.fixture
def dispatch_logger() -> DispatchLogger:
    return DispatchLogger()


@pytest.fixture
def client(
    settings: Settings,
    registry: ProviderRegistry,
    dispatch_logger: DispatchLogger,
) -> TestClient:
    """HTTP client over the real app wired to fake adapters."""
    app = create_app(settings=settings, registry=registry, dispatch_logger=dispatch_logger)
    return TestClient(app)


# === FIXTURES: Sample data ===


@pytest.fixture
def user_messages() -> list[Message]:
    return [
        Message(role="system", content="You are helpful."),
        Message(role="user", content="Summarise the attachment."),
    ]


@pytest.fixture
def make_upload():
    """Factory for UploadedFile instances."""

    def _make(filename: str, data: bytes, content_type: str = "application/octet-stream") -> UploadedFile:
        return UploadedFile(filename=filename, content_type=content_type, size=len(data), data=data)

    return _make


@pytest.fixture
def png_bytes() -> bytes:
    """Minimal PNG signature plus an IHDR-like tail (not decoded by the relay)."""
    return b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
