"""JSON file persistence for client chat history."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from ..models.transcript import ChatHistory

DEFAULT_HISTORY_PATH = Path.home() / ".freechat" / "history.json"


class TranscriptStore:
    """Load and save :class:`ChatHistory` to a single JSON file.

    A missing, empty or unreadable file never raises on load; a fresh
    history holding one welcome message is returned instead.
    """

    def __init__(self, path: str | Path = DEFAULT_HISTORY_PATH) -> None:
        self.path = Path(path)

    def load(self) -> ChatHistory:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ChatHistory.fresh()
        except OSError:
            logger.exception("Failed to read chat history from {}", self.path)
            return ChatHistory.fresh()
        except UnicodeDecodeError as exc:
            logger.error("Chat history at {} is not valid UTF-8: {}", self.path, exc)
            return ChatHistory.fresh()

        if not raw.strip():
            return ChatHistory.fresh()
        try:
            history = ChatHistory.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("Failed to parse chat history: {}", exc)
            return ChatHistory.fresh()

        if not history.chats:
            return ChatHistory.fresh()
        history.current()
        return history

    def save(self, history: ChatHistory) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(history.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)
