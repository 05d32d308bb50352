# src/extraction/extractor_factory.py — v1
"""Factory: instantiate extractor from file extension."""

from __future__ import annotations

from chatrelay.extraction.archive_extractor import ArchiveExtractor
from chatrelay.extraction.base_extractor import DEFAULT_TEXT_LIMIT, BaseExtractor
from chatrelay.extraction.docx_extractor import DocxExtractor
from chatrelay.extraction.image_input_extractor import ImageInputExtractor
from chatrelay.extraction.pdf_extractor import PdfExtractor
from chatrelay.extraction.txt_extractor import TxtExtractor
from chatrelay.extraction.xlsx_extractor import XlsxExtractor

# Registry maps extension → extractor class.
_EXTRACTOR_REGISTRY: dict[str, type[BaseExtractor]] = {}


def _register_defaults() -> None:
    """Register built-in extractors."""
    for cls in [ImageInputExtractor, PdfExtractor, DocxExtractor, XlsxExtractor,
                TxtExtractor, ArchiveExtractor]:
        instance = cls()
        for ext in instance.supported_extensions:
            _EXTRACTOR_REGISTRY[ext.lower()] = cls


_register_defaults()


class UnsupportedFormatError(ValueError):
    """Raised when no extractor is available for a format."""


def _normalize(extension: str) -> str:
    ext = extension.lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    return ext


def create_extractor(extension: str, text_limit: int = DEFAULT_TEXT_LIMIT) -> BaseExtractor:
    """Create an extractor for the given file extension.

    Args:
        extension: File extension, with or without the dot (".pdf", "PDF").
        text_limit: Maximum payload characters for text parts.

    Returns:
        BaseExtractor instance.

    Raises:
        UnsupportedFormatError: If no extractor is registered.
    """
    ext = _normalize(extension)
    cls = _EXTRACTOR_REGISTRY.get(ext)
    if cls is None:
        raise UnsupportedFormatError(
            f"No extractor for format {ext!r}. "
            f"Supported: {', '.join(sorted(_EXTRACTOR_REGISTRY))}"
        )
    return cls(text_limit=text_limit)


def register_extractor(extension: str, cls: type[BaseExtractor]) -> None:
    """Register a custom extractor for an extension."""
    _EXTRACTOR_REGISTRY[_normalize(extension)] = cls


def supported_extensions() -> list[str]:
    """Return list of supported file extensions."""
    return sorted(_EXTRACTOR_REGISTRY.keys())
