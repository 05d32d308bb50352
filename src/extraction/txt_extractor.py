# src/extraction/txt_extractor.py — v1
"""Plain text extractor — UTF-8 passthrough for txt, csv, json and md."""

from __future__ import annotations

from chatrelay.core.models import ContentPart, UploadedFile
from chatrelay.extraction.base_extractor import BaseExtractor


class TxtExtractor(BaseExtractor):
    """Extractor for text-like uploads. The header label is the extension."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".txt", ".csv", ".json", ".md"]

    def label_for(self, file: UploadedFile) -> str:
        return file.extension.upper() or "TXT"

    async def extract(self, file: UploadedFile) -> ContentPart:
        """Decode the buffer as UTF-8 (invalid bytes replaced)."""
        return self.text_part(file, file.data.decode("utf-8", errors="replace"))
