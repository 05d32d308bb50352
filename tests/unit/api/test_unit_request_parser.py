# tests/unit/api/test_unit_request_parser.py — v1
"""Tests for api/request_parser.py — message validation and upload limits."""

from __future__ import annotations

import io
import json

import pytest
from starlette.datastructures import UploadFile

from chatrelay.api.request_parser import _measure, parse_messages, validate_uploads
from chatrelay.config.settings import Settings
from chatrelay.core.errors import MalformedRequestError, UnsupportedMediaError
from chatrelay.core.models import ImagePart, TextPart


def _upload(filename: str, data: bytes = b"x", size: int | None = -1) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        size=len(data) if size == -1 else size,
    )


class TestParseMessages:
    def test_list(self):
        messages = parse_messages([{"role": "user", "content": "hi"}])
        assert messages[0].content == "hi"

    def test_json_string(self):
        raw = json.dumps([
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "hi"},
        ])
        assert [m.role for m in parse_messages(raw)] == ["system", "user"]

    def test_structured_content(self):
        messages = parse_messages([{
            "role": "user",
            "content": [
                {"type": "text", "text": "what is this"},
                {"type": "image_url", "image_url": {"url": "https://example.com/a.png"}},
            ],
        }])
        assert isinstance(messages[0].content[0], TextPart)
        assert isinstance(messages[0].content[1], ImagePart)

    @pytest.mark.parametrize("raw", [None, [], {}, "not json", "{}", "[]", 42])
    def test_malformed(self, raw):
        with pytest.raises(MalformedRequestError):
            parse_messages(raw)

    def test_deeply_nested_json_string(self):
        with pytest.raises(MalformedRequestError, match="not valid JSON"):
            parse_messages("[" * 100_000 + "]" * 100_000)

    def test_invalid_role(self):
        with pytest.raises(MalformedRequestError, match="Invalid message"):
            parse_messages([{"role": "tool", "content": "x"}])

    def test_missing_content(self):
        with pytest.raises(MalformedRequestError):
            parse_messages([{"role": "user"}])

    def test_final_message_must_be_user(self):
        with pytest.raises(MalformedRequestError, match="role 'user'"):
            parse_messages([
                {"role": "user", "content": "hi"},
                {"role": "assistant", "content": "hello"},
            ])


class TestValidateUploads:
    @pytest.fixture
    def limits(self) -> Settings:
        return Settings(_env_file=None, max_upload_files=2, max_upload_size_mb=1)

    def test_accepts_allowed(self, limits):
        validate_uploads([_upload("a.PDF"), _upload("b.png")], limits)

    def test_too_many_files(self, limits):
        with pytest.raises(UnsupportedMediaError, match="Too many files"):
            validate_uploads([_upload("a.txt"), _upload("b.txt"), _upload("c.txt")], limits)

    def test_disallowed_extension(self, limits):
        with pytest.raises(UnsupportedMediaError) as exc_info:
            validate_uploads([_upload("run.exe")], limits)
        assert exc_info.value.filename == "run.exe"

    def test_missing_extension(self, limits):
        with pytest.raises(UnsupportedMediaError):
            validate_uploads([_upload("Makefile")], limits)

    def test_oversize(self, limits):
        with pytest.raises(UnsupportedMediaError, match="1 MB"):
            validate_uploads([_upload("big.txt", size=1024 * 1024 + 1)], limits)

    def test_size_measured_when_unknown(self, limits):
        with pytest.raises(UnsupportedMediaError):
            validate_uploads([_upload("big.txt", b"a" * (1024 * 1024 + 1), size=None)], limits)

    def test_exact_limit_accepted(self, limits):
        validate_uploads([_upload("ok.txt", size=1024 * 1024)], limits)


class TestMeasure:
    def test_restores_position(self):
        upload = _upload("a.txt", b"hello", size=None)
        upload.file.seek(2)
        assert _measure(upload) == 5
        assert upload.file.tell() == 2
