"""Attachment validation and encoding."""

from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from loguru import logger

from ..models.chat_message import MAX_FILE_SIZE, SUPPORTED_MIME_TYPES, FileRef
from ..utils.error_handler import FileValidationError

EXTENSION_TYPES = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".json": "application/json",
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


@dataclass
class UploadResult:
    """Outcome of validating several files at once."""

    files: list[FileRef] = field(default_factory=list)
    errors: list[FileValidationError] = field(default_factory=list)


class FileUploadHandler:
    """Validate local files and turn them into :class:`FileRef` attachments.

    Every check runs before anything is sent to the server.
    """

    def __init__(
        self,
        max_file_size: int = MAX_FILE_SIZE,
        supported_types: Iterable[str] = SUPPORTED_MIME_TYPES,
    ) -> None:
        self.max_file_size = max_file_size
        self.supported_types = tuple(supported_types)

    def handle_file(self, path: str | Path) -> FileRef:
        path = Path(path)
        try:
            size = path.stat().st_size
        except OSError as exc:
            raise FileValidationError(path.name, "Failed to read file") from exc

        if size > self.max_file_size:
            raise FileValidationError(
                path.name,
                f"File too large. Maximum size is {self.max_file_size // (1024 * 1024)}MB",
            )

        mime_type = guess_mime_type(path)
        if mime_type not in self.supported_types:
            raise FileValidationError(path.name, f"Unsupported file type: {mime_type or 'unknown'}")

        try:
            content = base64.b64encode(path.read_bytes()).decode("ascii")
        except OSError as exc:
            raise FileValidationError(path.name, "Failed to read file") from exc

        return FileRef(name=path.name, mime_type=mime_type, size_bytes=size, base64_content=content)

    def handle_files(self, paths: Iterable[str | Path]) -> UploadResult:
        """Validate each file on its own; a bad file never blocks the others."""
        result = UploadResult()
        for path in paths:
            try:
                result.files.append(self.handle_file(path))
            except FileValidationError as exc:
                logger.warning("Attachment rejected: {}", exc)
                result.errors.append(exc)
        return result

    @staticmethod
    def supported_extensions() -> list[str]:
        return sorted(EXTENSION_TYPES)


def guess_mime_type(path: Path) -> str | None:
    mime_type = EXTENSION_TYPES.get(path.suffix.lower())
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type
