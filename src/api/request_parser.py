# src/api/request_parser.py — v1
"""Normalise an incoming chat request into a ChatRequest.

Two encodings are accepted and reduced to one shape here, so nothing
downstream branches on how the request arrived:
  - ``application/json``: ``{"messages": [...], "model": "..."}``
  - ``multipart/form-data``: ``messages`` (JSON string), ``model`` and up
    to N ``files``, each checked against the extension allow-list and the
    per-file size limit before any byte is processed.

``messages`` may be a list or a JSON-encoded string in either mode.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Request
from pydantic import TypeAdapter, ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatrelay.config.settings import Settings
from chatrelay.core.errors import MalformedRequestError, UnsupportedMediaError
from chatrelay.core.models import ChatRequest, Message, UploadedFile
from chatrelay.llm.config import AUTO

logger = logging.getLogger(__name__)

_MESSAGES_ADAPTER = TypeAdapter(list[Message])


async def parse_chat_request(request: Request, settings: Settings) -> ChatRequest:
    """Read, validate and normalise the request body.

    Raises:
        MalformedRequestError: Unparsable body, missing/invalid messages,
            or a final message that is not a user turn.
        UnsupportedMediaError: Too many files, a disallowed extension, or
            a file over the size limit.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("multipart/form-data"):
        fields, files = await _read_multipart(request, settings)
    else:
        fields, files = await _read_json(request), []

    messages = parse_messages(fields.get("messages"))
    model = fields.get("model")
    if not isinstance(model, str) or not model.strip():
        model = AUTO

    logger.info(
        "Chat request: %d message(s), %d file(s), model=%s",
        len(messages), len(files), model,
    )
    return ChatRequest(messages=messages, model=model.strip(), files=files)


def parse_messages(raw: Any) -> list[Message]:
    """Validate ``messages`` given as a list or as a JSON string."""
    if raw is None:
        raise MalformedRequestError("Missing 'messages'")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise MalformedRequestError(f"'messages' is not valid JSON: {exc}") from exc
    if not isinstance(raw, list) or not raw:
        raise MalformedRequestError("'messages' must be a non-empty array")

    try:
        messages = _MESSAGES_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise MalformedRequestError(
            f"Invalid message: {exc.errors()[0].get('msg', 'validation failed')}"
        ) from exc

    if messages[-1].role != "user":
        raise MalformedRequestError(
            f"Final message must have role 'user', got {messages[-1].role!r}"
        )
    return messages


async def _read_json(request: Request) -> dict[str, Any]:
    body = await request.body()
    if not body.strip():
        raise MalformedRequestError("Empty request body")
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise MalformedRequestError(f"Unparsable JSON body: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedRequestError("Request body must be a JSON object")
    return payload


async def _read_multipart(
    request: Request, settings: Settings,
) -> tuple[dict[str, Any], list[UploadedFile]]:
    try:
        form = await request.form()
    except StarletteHTTPException as exc:
        raise MalformedRequestError(f"Invalid multipart body: {exc.detail}") from exc
    except Exception as exc:
        raise MalformedRequestError(f"Invalid multipart body: {exc}") from exc

    try:
        fields = {
            key: value for key, value in form.multi_items()
            if not isinstance(value, UploadFile)
        }
        uploads = [f for f in form.getlist("files") if isinstance(f, UploadFile)]
        validate_uploads(uploads, settings)

        files: list[UploadedFile] = []
        for upload in uploads:
            data = await upload.read()
            files.append(
                UploadedFile(
                    filename=upload.filename or "upload",
                    content_type=upload.content_type or "application/octet-stream",
                    size=len(data),
                    data=data,
                )
            )
        return fields, files
    finally:
        await form.close()


def validate_uploads(uploads: list[UploadFile], settings: Settings) -> None:
    """Reject the whole request if any upload breaks the limits."""
    if len(uploads) > settings.max_upload_files:
        raise UnsupportedMediaError(
            f"Too many files: {len(uploads)} (maximum {settings.max_upload_files})"
        )

    allowed = set(settings.upload_allowed_extensions_list)
    for upload in uploads:
        filename = upload.filename or ""
        ext = filename.rsplit(".", 1)[1].lower() if "." in filename else ""
        if ext not in allowed:
            raise UnsupportedMediaError(
                f"File type not allowed: {filename or '<unnamed>'}", filename=filename,
            )
        size = upload.size if upload.size is not None else _measure(upload)
        if size > settings.max_upload_size_bytes:
            raise UnsupportedMediaError(
                f"{filename} exceeds the {settings.max_upload_size_mb} MB upload limit",
                filename=filename,
            )


def _measure(upload: UploadFile) -> int:
    """Size of a spooled upload whose size was not recorded by the parser."""
    f = upload.file
    pos = f.tell()
    f.seek(0, 2)
    size = f.tell()
    f.seek(pos)
    return size
