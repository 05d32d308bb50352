# src/extraction/attachment_processor.py — v1
"""Attachment processor — one uploaded file in, one content part out.

Dispatch is by extension through the extractor registry. Extensions with
no extractor get a short notice naming the file, its MIME type and size.
A failing extractor never fails the request: its exception is logged and
replaced by an ``[Error processing <filename>]: <message>`` text part.

Files of one request are processed concurrently; results keep upload order.
"""

from __future__ import annotations

import asyncio
import logging

from chatrelay.core.errors import ExtractionError
from chatrelay.core.models import ContentPart, TextPart, UploadedFile
from chatrelay.extraction.base_extractor import DEFAULT_TEXT_LIMIT
from chatrelay.extraction.extractor_factory import UnsupportedFormatError, create_extractor

logger = logging.getLogger(__name__)

UNSUPPORTED_NOTE = "Note: This file type may not be fully supported."


class AttachmentProcessor:
    """Convert uploads into message content parts."""

    def __init__(self, text_limit: int = DEFAULT_TEXT_LIMIT) -> None:
        self._text_limit = text_limit

    async def process(self, file: UploadedFile) -> ContentPart:
        """Convert a single upload. Never raises for extraction problems."""
        try:
            extractor = create_extractor(file.extension or "bin", text_limit=self._text_limit)
        except UnsupportedFormatError:
            logger.info("No extractor for %s; sending file notice", file.filename)
            return self._notice(file)

        try:
            part = await extractor.extract(file)
        except ExtractionError as exc:
            logger.warning("Error processing %s: %s", file.filename, exc.message)
            return self._error_part(file, exc.message)
        except Exception as exc:
            logger.warning(
                "Error processing %s with %s: %s",
                file.filename, type(extractor).__name__, exc, exc_info=True,
            )
            return self._error_part(file, str(exc) or type(exc).__name__)

        logger.debug("Processed %s as %s part", file.filename, part.type)
        return part

    async def process_all(self, files: list[UploadedFile]) -> list[ContentPart]:
        """Convert all uploads concurrently, returning parts in upload order."""
        if not files:
            return []
        logger.info("Processing %d attachment(s)", len(files))
        return list(await asyncio.gather(*(self.process(f) for f in files)))

    @staticmethod
    def _error_part(file: UploadedFile, message: str) -> TextPart:
        return TextPart(text=f"[Error processing {file.filename}]: {message}")

    @staticmethod
    def _notice(file: UploadedFile) -> TextPart:
        return TextPart(
            text=(
                f"[File: {file.filename}]\nType: {file.content_type}\n"
                f"Size: {file.size_kb}\n\n{UNSUPPORTED_NOTE}"
            )
        )
