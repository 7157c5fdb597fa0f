"""Shared provider contract and message helpers."""

from __future__ import annotations

import base64
import binascii
from typing import Protocol, Sequence, runtime_checkable

from ..models.chat_message import ChatMessage, FileRef

FALLBACK_REPLY = "Sorry, I couldn't generate a response."


@runtime_checkable
class Provider(Protocol):
    """An upstream text generator.

    ``chat`` returns the assistant's reply or raises
    :class:`~freechat.utils.error_handler.UpstreamError`.
    """

    name: str

    async def chat(self, messages: Sequence[ChatMessage]) -> str: ...


def last_user_text(messages: Sequence[ChatMessage], default: str = "Hello") -> str:
    """Return the content of the last message, or ``default`` if there is none."""
    if not messages:
        return default
    return messages[-1].content or default


def describe_attachment(attachment: FileRef) -> str:
    """Render a non-image attachment as plain text for a prompt.

    Text and JSON files are inlined; other types are summarised by name,
    type and size.
    """
    if attachment.mime_type.startswith("text/") or attachment.mime_type == "application/json":
        try:
            text = base64.b64decode(attachment.base64_content).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            text = None
        if text is not None:
            return f"[File: {attachment.name}]\n\n{text}\n\n[End of file]"
    return f"[Attached file: {attachment.name} ({attachment.mime_type}) - {attachment.size_bytes / 1024:.1f}KB]"
