# src/extraction/docx_extractor.py — v1
"""DOCX extractor using python-docx.

Extracts the raw text of a Word document: paragraphs in order, followed by
table rows (cells tab-separated). Formatting and images are ignored.
Requires the 'python-docx' package.
"""

from __future__ import annotations

import asyncio
import io

from chatrelay.core.errors import ExtractionError
from chatrelay.core.models import ContentPart, UploadedFile
from chatrelay.extraction.base_extractor import BaseExtractor


class DocxExtractor(BaseExtractor):
    """Extractor for Word documents (.docx)."""

    label = "Word Document"

    @property
    def supported_extensions(self) -> list[str]:
        return [".docx"]

    async def extract(self, file: UploadedFile) -> ContentPart:
        """Extract raw document text."""
        try:
            text = await asyncio.to_thread(self._extract_text, file.data)
        except Exception as exc:
            raise ExtractionError(str(exc) or type(exc).__name__) from exc
        return self.text_part(file, text)

    @classmethod
    def _extract_text(cls, data: bytes) -> str:
        try:
            import docx
        except ImportError as e:
            raise ImportError(
                "python-docx package required for DOCX extraction: "
                "pip install python-docx"
            ) from e

        doc = docx.Document(io.BytesIO(data))
        parts = [para.text for para in doc.paragraphs if para.text.strip()]
        for table in doc.tables:
            rows = [[cell.text.strip() for cell in row.cells] for row in table.rows]
            table_text = cls._rows_to_text(rows)
            if table_text:
                parts.append(table_text)
        return "\n\n".join(parts)

    @staticmethod
    def _rows_to_text(rows: list[list[str]]) -> str:
        """Render table rows as tab-separated lines, skipping empty rows."""
        return "\n".join("\t".join(row) for row in rows if any(row))
