# tests/unit/llm/adapters/test_unit_openai_adapter.py — v1
"""Tests for llm/adapters/openai_adapter.py — streaming, truncation, wire format."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from chatrelay.core.errors import UpstreamUnavailableError
from chatrelay.core.models import ImagePart, Message, TextPart
from chatrelay.llm.adapters.openai_adapter import (
    CompletionDeltas,
    OpenAICompatibleAdapter,
    _delta_text,
)
from chatrelay.llm.models import SamplingParams
from tests.fakes import make_descriptor, make_vision_descriptor


def _chunk(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class FakeStream:
    """Mimics openai.AsyncStream: async iterable with an async close()."""

    def __init__(self, contents: list[str | None], fail_after: int | None = None) -> None:
        self._contents = contents
        self._fail_after = fail_after
        self.closed = 0

    def __aiter__(self):
        return self._gen()

    async def _gen(self):
        for i, content in enumerate(self._contents):
            if self._fail_after is not None and i == self._fail_after:
                raise ConnectionError("connection reset")
            yield _chunk(content)

    async def close(self) -> None:
        self.closed += 1


def _sdk(stream=None, error: Exception | None = None) -> MagicMock:
    sdk = MagicMock()
    if error is not None:
        sdk.chat.completions.create = AsyncMock(side_effect=error)
    else:
        sdk.chat.completions.create = AsyncMock(return_value=stream)
    return sdk


async def _drain(deltas) -> list[str]:
    return [d async for d in deltas]


class TestChat:
    @pytest.mark.asyncio
    async def test_streams_deltas(self):
        stream = FakeStream(["Hel", "lo", None, "!"])
        adapter = OpenAICompatibleAdapter(make_descriptor("kimi"), client=_sdk(stream))
        deltas = await adapter.chat([Message(role="user", content="hi")])
        assert isinstance(deltas, CompletionDeltas)
        assert await _drain(deltas) == ["Hel", "lo", "", "!"]
        assert deltas.truncated is False
        assert stream.closed == 1

    @pytest.mark.asyncio
    async def test_open_failure_raises_upstream_unavailable(self):
        adapter = OpenAICompatibleAdapter(
            make_descriptor("kimi"), client=_sdk(error=RuntimeError("401 unauthorized")),
        )
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await adapter.chat([Message(role="user", content="hi")])
        assert exc_info.value.provider == "kimi"
        assert "401" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_mid_stream_failure_truncates(self):
        stream = FakeStream(["a", "b", "c"], fail_after=2)
        adapter = OpenAICompatibleAdapter(make_descriptor("kimi"), client=_sdk(stream))
        deltas = await adapter.chat([Message(role="user", content="hi")])
        assert await _drain(deltas) == ["a", "b"]
        assert deltas.truncated is True
        assert stream.closed == 1

    @pytest.mark.asyncio
    async def test_aclose_is_idempotent(self):
        stream = FakeStream(["a", "b"])
        deltas = CompletionDeltas(stream, source="test")
        assert await deltas.__anext__() == "a"
        await deltas.aclose()
        await deltas.aclose()
        assert stream.closed == 1
        assert await _drain(deltas) == []

    @pytest.mark.asyncio
    async def test_request_kwargs(self):
        sdk = _sdk(FakeStream([]))
        descriptor = make_descriptor(
            "cerebras", provider="cerebras",
            params=SamplingParams(temperature=0.6, top_p=0.95, max_tokens=8192),
        )
        adapter = OpenAICompatibleAdapter(descriptor, client=sdk)
        await adapter.chat([Message(role="user", content="hi")])
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "model-cerebras"
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert kwargs["temperature"] == 0.6
        assert kwargs["top_p"] == 0.95
        assert kwargs["max_completion_tokens"] == 8192
        assert kwargs["stream"] is True
        assert "reasoning_effort" not in kwargs

    @pytest.mark.asyncio
    async def test_reasoning_effort_sent_for_reasoning_kind(self):
        sdk = _sdk(FakeStream([]))
        descriptor = make_descriptor(
            "reasoning", kind="reasoning",
            params=SamplingParams(temperature=1.0, max_tokens=8192, reasoning_effort="medium"),
        )
        await OpenAICompatibleAdapter(descriptor, client=sdk).chat(
            [Message(role="user", content="hi")]
        )
        assert sdk.chat.completions.create.call_args.kwargs["reasoning_effort"] == "medium"


class TestWireFormat:
    def _structured(self) -> Message:
        return Message(role="user", content=[
            TextPart(text="Describe this"),
            ImagePart.from_data(b"img", "image/png"),
            TextPart(text="[TXT: notes.txt]\n\nhello"),
        ])

    def test_text_only_adapter_flattens(self):
        adapter = OpenAICompatibleAdapter(make_descriptor("kimi"), client=MagicMock())
        wire = adapter._to_wire(self._structured())
        assert wire == {
            "role": "user",
            "content": "Describe this\n\n[TXT: notes.txt]\n\nhello",
        }

    def test_image_adapter_keeps_parts(self):
        adapter = OpenAICompatibleAdapter(make_vision_descriptor(), client=MagicMock())
        wire = adapter._to_wire(self._structured())
        assert isinstance(wire["content"], list)
        assert wire["content"][1]["type"] == "image_url"
        assert wire["content"][1]["image_url"]["url"].startswith("data:image/png;base64,")

    def test_plain_string_passthrough(self):
        adapter = OpenAICompatibleAdapter(make_descriptor("kimi"), client=MagicMock())
        assert adapter._to_wire(Message(role="system", content="Be brief")) == {
            "role": "system", "content": "Be brief",
        }


class TestDeltaText:
    def test_content(self):
        assert _delta_text(_chunk("abc")) == "abc"

    def test_none_content(self):
        assert _delta_text(_chunk(None)) == ""

    def test_no_choices(self):
        assert _delta_text(SimpleNamespace(choices=[])) == ""


class TestLazyClient:
    def test_sdk_client_built_from_descriptor(self):
        adapter = OpenAICompatibleAdapter(
            make_descriptor("kimi", base_url="https://api.groq.com/openai/v1", api_key="gsk"),
        )
        sdk = adapter._client
        assert str(sdk.base_url).startswith("https://api.groq.com/openai/v1")
        assert sdk.api_key == "gsk"
        assert adapter._client is sdk
