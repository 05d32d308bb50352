# src/extraction/pdf_extractor.py — v1
"""PDF extractor using PyMuPDF (fitz).

Extracts the text layer page by page. A PDF that cannot be parsed yields a
diagnostic text part instead of an error, so the rest of the conversation
still reaches the model.
Requires the 'pymupdf' package.
"""

from __future__ import annotations

import asyncio
import logging

from chatrelay.core.models import ContentPart, TextPart, UploadedFile
from chatrelay.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


class PdfExtractor(BaseExtractor):
    """Extractor for PDF files using PyMuPDF."""

    label = "PDF"

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    async def extract(self, file: UploadedFile) -> ContentPart:
        """Extract the text of every page, joined by newlines."""
        try:
            text = await asyncio.to_thread(self._extract_text, file.data)
        except Exception as exc:
            logger.warning("PDF extraction failed for %s: %s", file.filename, exc)
            return TextPart(
                text=f"[PDF: {file.filename}]\nFailed to extract text. Error: {exc}"
            )
        return self.text_part(file, text)

    @staticmethod
    def _extract_text(data: bytes) -> str:
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        doc = fitz.open(stream=data, filetype="pdf")
        try:
            return "\n".join(page.get_text("text") for page in doc)
        finally:
            doc.close()
