# src/extraction/xlsx_extractor.py — v1
"""XLSX extractor using openpyxl.

Each worksheet is rendered as CSV under a ``Sheet: <name>`` line; sheets
are separated by a blank line. Cells hold their cached values, so formulas
appear as their last computed result.
Requires the 'openpyxl' package.
"""

from __future__ import annotations

import asyncio
import csv
import io

from chatrelay.core.errors import ExtractionError
from chatrelay.core.models import ContentPart, UploadedFile
from chatrelay.extraction.base_extractor import BaseExtractor


class XlsxExtractor(BaseExtractor):
    """Extractor for Excel workbooks (.xlsx)."""

    label = "Excel Spreadsheet"

    @property
    def supported_extensions(self) -> list[str]:
        return [".xlsx"]

    async def extract(self, file: UploadedFile) -> ContentPart:
        """Render every sheet as CSV."""
        try:
            text = await asyncio.to_thread(self._extract_text, file.data)
        except Exception as exc:
            raise ExtractionError(str(exc) or type(exc).__name__) from exc
        return self.text_part(file, text)

    @classmethod
    def _extract_text(cls, data: bytes) -> str:
        try:
            import openpyxl
        except ImportError as e:
            raise ImportError(
                "openpyxl package required for XLSX extraction: pip install openpyxl"
            ) from e

        workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            sheets = [
                f"Sheet: {ws.title}\n{cls._rows_to_csv(ws.iter_rows(values_only=True))}"
                for ws in workbook.worksheets
            ]
        finally:
            workbook.close()
        return "\n\n".join(sheets)

    @staticmethod
    def _rows_to_csv(rows) -> str:
        """Serialize row tuples to CSV text (None cells become empty)."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        for row in rows:
            writer.writerow(["" if value is None else value for value in row])
        return buffer.getvalue().rstrip("\n")
