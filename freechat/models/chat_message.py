"""Models representing chat messages and their file attachments."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import MessageRole

MAX_FILE_SIZE = 20 * 1024 * 1024

SUPPORTED_MIME_TYPES: tuple[str, ...] = (
    "text/plain",
    "text/markdown",
    "text/csv",
    "application/pdf",
    "application/json",
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/gif",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


class FileRef(BaseModel):
    """A file attached to a user message.

    The payload travels base64-encoded.  Size and type are checked on the
    client before upload and validated again when the server parses them.  The
    wire names (``type``, ``size``, ``content``) are accepted as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    mime_type: str = Field(..., alias="type")
    size_bytes: int = Field(..., ge=0, le=MAX_FILE_SIZE, alias="size")
    base64_content: str = Field(..., alias="content")

    @field_validator("mime_type")
    @classmethod
    def validate_mime_type(cls, value: str) -> str:
        if value not in SUPPORTED_MIME_TYPES:
            raise ValueError(f"Unsupported file type: {value}")
        return value


class ChatMessage(BaseModel):
    """Represents a single message in a transcript.

    Messages are immutable once appended.  The client grows the streaming
    assistant reply by replacing the last message rather than mutating it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: MessageRole
    content: str
    attachments: list[FileRef] | None = Field(default=None, alias="files")

    def to_wire(self) -> dict[str, object]:
        """Return the JSON payload sent to ``/api/chat``."""
        payload: dict[str, object] = {"role": self.role.value, "content": self.content}
        if self.attachments:
            payload["files"] = [
                attachment.model_dump(by_alias=True) for attachment in self.attachments
            ]
        return payload
