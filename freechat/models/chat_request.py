"""Request model for the chat API."""

from pydantic import BaseModel, Field

from .chat_message import ChatMessage


class ChatRequest(BaseModel):
    """Represents a request payload for ``POST /api/chat``.

    The server is stateless per request, so the client sends the whole
    transcript every time.  The last message is normally the user's
    newest prompt.
    """

    messages: list[ChatMessage] = Field(
        ...,
        description="Full transcript, oldest first.",
    )
