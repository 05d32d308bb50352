# src/extraction/archive_extractor.py — v1
"""Archive placeholder — zip and rar uploads are never unpacked.

The model only learns the archive's name and size and the user is told to
upload the members individually.
"""

from __future__ import annotations

from chatrelay.core.models import ContentPart, TextPart, UploadedFile
from chatrelay.extraction.base_extractor import BaseExtractor

ARCHIVE_NOTE = (
    "Note: Archive contents not extracted for security. "
    "Please extract files manually and upload individual files."
)


class ArchiveExtractor(BaseExtractor):
    """Extractor for .zip and .rar uploads (notice only)."""

    label = "Archive"

    @property
    def supported_extensions(self) -> list[str]:
        return [".zip", ".rar"]

    async def extract(self, file: UploadedFile) -> ContentPart:
        return TextPart(
            text=f"[{self.label}: {file.filename}]\nSize: {file.size_kb}\n\n{ARCHIVE_NOTE}"
        )
