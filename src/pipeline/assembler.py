# src/pipeline/assembler.py — v1
"""Message assembler — merge attachment parts into the final user turn."""

from __future__ import annotations

from chatrelay.core.errors import MalformedRequestError
from chatrelay.core.models import ContentPart, Message, TextPart


def assemble(messages: list[Message], parts: list[ContentPart]) -> list[Message]:
    """Attach content parts to the last (user) message.

    The last message's content becomes ``[text, *parts]`` where ``text``
    is its string content, or the first text part of structured content.
    Earlier messages are untouched and the input list is not mutated.

    Args:
        messages: Conversation envelope.
        parts: One part per attachment, in upload order.

    Returns:
        New conversation list (the input itself when there are no parts).

    Raises:
        MalformedRequestError: If the conversation is empty or the last
            message is not a user turn.
    """
    if not parts:
        return messages
    if not messages:
        raise MalformedRequestError("Conversation is empty")

    last = messages[-1]
    if last.role != "user":
        raise MalformedRequestError(
            f"Attachments require a final user message, got role {last.role!r}"
        )

    merged = last.model_copy(
        update={"content": [TextPart(text=last.first_text()), *parts]}
    )
    return [*messages[:-1], merged]


def requires_images(messages: list[Message]) -> bool:
    """Whether any message carries an image part."""
    return any(m.has_images for m in messages)
