# src/extraction/image_input_extractor.py — v1
"""Image extractor — uploads become inline base64 image parts.

The whole buffer is encoded as ``data:<mime>;base64,<payload>`` without
resizing. The declared MIME type is used when it names an image; otherwise
it is inferred from the extension.
"""

from __future__ import annotations

import logging

from chatrelay.core.models import ContentPart, ImagePart, UploadedFile
from chatrelay.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)

# Mapping of extensions to MIME types
_MIME_MAP: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}


class ImageInputExtractor(BaseExtractor):
    """Extractor for image uploads sent to vision-capable models."""

    label = "Image"

    @property
    def supported_extensions(self) -> list[str]:
        return [".jpg", ".jpeg", ".png", ".gif", ".webp"]

    async def extract(self, file: UploadedFile) -> ContentPart:
        """Encode the entire buffer as a data URL."""
        media_type = self._detect_media_type(file)
        logger.debug("Encoding image %s (%s, %d bytes)", file.filename, media_type, file.size)
        return ImagePart.from_data(file.data, media_type)

    @staticmethod
    def _detect_media_type(file: UploadedFile) -> str:
        """Prefer the declared image MIME type, else map the extension."""
        declared = (file.content_type or "").lower()
        if declared.startswith("image/"):
            return declared
        return _MIME_MAP.get(file.extension, "image/png")
