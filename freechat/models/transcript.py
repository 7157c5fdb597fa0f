"""Client-side chat history models."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field

from .chat_message import ChatMessage
from .enums import MessageRole

WELCOME_MESSAGE = "Hello! How can I help you today?"


def _new_chat_id() -> int:
    return int(time.time() * 1000)


class Chat(BaseModel):
    """One transcript, identified by its creation time in milliseconds."""

    id: int = Field(default_factory=_new_chat_id)
    messages: list[ChatMessage] = Field(default_factory=list)

    @classmethod
    def welcome(cls) -> "Chat":
        return cls(messages=[ChatMessage(role=MessageRole.ASSISTANT, content=WELCOME_MESSAGE)])

    @property
    def title(self) -> str:
        for message in self.messages:
            if message.role == MessageRole.USER:
                return message.content
        return "New Chat"


class ChatHistory(BaseModel):
    """Every stored chat plus the one currently open."""

    chats: list[Chat] = Field(default_factory=list)
    current_chat_id: int | None = None

    @classmethod
    def fresh(cls) -> "ChatHistory":
        chat = Chat.welcome()
        return cls(chats=[chat], current_chat_id=chat.id)

    def current(self) -> Chat:
        """Return the open chat, falling back to the newest one."""
        for chat in self.chats:
            if chat.id == self.current_chat_id:
                return chat
        if not self.chats:
            self.chats.append(Chat.welcome())
        self.current_chat_id = self.chats[0].id
        return self.chats[0]

    def new_chat(self) -> Chat:
        chat = Chat.welcome()
        while any(existing.id == chat.id for existing in self.chats):
            chat.id += 1
        self.chats.insert(0, chat)
        self.current_chat_id = chat.id
        return chat
