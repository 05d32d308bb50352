# src/extraction/base_extractor.py — v1
"""Abstract extractor interface for uploaded attachments.

An extractor turns one UploadedFile into exactly one content part. Text
extractors share the header/truncation rule implemented by ``text_part``:

    [<LABEL>: <filename>]

    <payload, at most text_limit characters>
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from chatrelay.core.models import ContentPart, TextPart, UploadedFile

DEFAULT_TEXT_LIMIT = 10_000


class BaseExtractor(ABC):
    """Unified interface for attachment extractors."""

    label: str = "File"

    def __init__(self, text_limit: int = DEFAULT_TEXT_LIMIT) -> None:
        self._text_limit = text_limit

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this extractor handles (e.g., ['.pdf'])."""

    @abstractmethod
    async def extract(self, file: UploadedFile) -> ContentPart:
        """Convert the upload into a single content part."""

    @property
    def text_limit(self) -> int:
        return self._text_limit

    def label_for(self, file: UploadedFile) -> str:
        """Header label for a file; constant per extractor unless overridden."""
        return self.label

    def text_part(self, file: UploadedFile, payload: str) -> TextPart:
        """Truncate the payload, then prefix the ``[LABEL: filename]`` header."""
        body = payload[: self._text_limit]
        return TextPart(text=f"[{self.label_for(file)}: {file.filename}]\n\n{body}")
