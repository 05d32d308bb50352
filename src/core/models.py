# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

Conversation messages and their content parts are shaped exactly like the
OpenAI chat-completions wire format, so a validated ``Message`` can be
dumped and forwarded upstream without further translation.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator


# === CONTENT PARTS ===


class TextPart(BaseModel):
    """Plain text chunk of a multi-part message body."""

    type: Literal["text"] = "text"
    text: str = ""


class ImageUrl(BaseModel):
    """Image reference: remote http(s) URL or inline base64 data URL."""

    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://", "data:")):
            raise ValueError("image url must be http(s):// or a data: URL")
        return v


class ImagePart(BaseModel):
    """Image chunk of a multi-part message body."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl

    @classmethod
    def from_data(cls, data: bytes, mime_type: str) -> ImagePart:
        """Build an inline ``data:<mime>;base64,<payload>`` image part."""
        import base64

        b64 = base64.b64encode(data).decode("ascii")
        return cls(image_url=ImageUrl(url=f"data:{mime_type};base64,{b64}"))


ContentPart = Annotated[TextPart | ImagePart, Field(discriminator="type")]


# === CONVERSATION ===


class Message(BaseModel):
    """Single turn in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str | list[ContentPart]

    @property
    def has_images(self) -> bool:
        """Whether structured content carries at least one image part."""
        if isinstance(self.content, str):
            return False
        return any(isinstance(part, ImagePart) for part in self.content)

    def first_text(self) -> str:
        """Plain string content, or the first text part of structured content."""
        if isinstance(self.content, str):
            return self.content
        for part in self.content:
            if isinstance(part, TextPart):
                return part.text
        return ""

    def text_parts(self) -> list[str]:
        """All text in order: the string itself, or every text part."""
        if isinstance(self.content, str):
            return [self.content]
        return [part.text for part in self.content if isinstance(part, TextPart)]


# === UPLOADS ===


class UploadedFile(BaseModel):
    """Transient upload, valid for the lifetime of a single request."""

    filename: str
    content_type: str = "application/octet-stream"
    size: int
    data: bytes

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot ("" when there is none)."""
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[1].lower()

    @property
    def size_kb(self) -> str:
        """Human-readable size in KB with two decimals."""
        return f"{self.size / 1024:.2f} KB"


class ChatRequest(BaseModel):
    """Normalised chat request, independent of the wire encoding it came in."""

    messages: list[Message]
    model: str = "auto"
    files: list[UploadedFile] = Field(default_factory=list)
