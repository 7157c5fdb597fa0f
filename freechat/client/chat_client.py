"""HTTP consumer for the chat endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from ..models.chat_message import ChatMessage
from ..models.enums import MessageRole
from ..models.usage import UsageStats
from .stream_parser import StreamDecoder

GENERIC_ERROR_REPLY = (
    "I'm having trouble connecting to the assistant. Please check your connection and try again."
)

TokenCallback = Callable[[str], None]


@dataclass
class ChatOutcome:
    """What happened to one send."""

    ok: bool
    status_code: Optional[int] = None
    reply: str = ""
    stats: Optional[UsageStats] = None


class ChatClient:
    """Post a transcript to ``/api/chat`` and grow the reply as it streams.

    The caller owns the transcript list.  :meth:`send` appends exactly one
    assistant message to it: the streamed reply, the server's quota
    warning, or a generic error.  Nothing is retried.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self._timeout, transport=self._transport
        )

    async def send(
        self,
        transcript: list[ChatMessage],
        on_token: Optional[TokenCallback] = None,
    ) -> ChatOutcome:
        payload = {"messages": [message.to_wire() for message in transcript]}
        streaming = False
        try:
            async with self._client() as client:
                async with client.stream("POST", "/api/chat", json=payload) as response:
                    if response.status_code == 429:
                        return self._quota_exceeded(transcript, await response.aread())
                    if not response.is_success:
                        logger.error("Chat request failed with HTTP {}", response.status_code)
                        transcript.append(_assistant(GENERIC_ERROR_REPLY))
                        return ChatOutcome(ok=False, status_code=response.status_code)

                    transcript.append(_assistant(""))
                    streaming = True
                    decoder = StreamDecoder()
                    async for chunk in response.aiter_bytes():
                        for token in decoder.feed(chunk):
                            _append_token(transcript, token, on_token)
                    for token in decoder.flush():
                        _append_token(transcript, token, on_token)
                    return ChatOutcome(
                        ok=True, status_code=response.status_code, reply=transcript[-1].content
                    )
        except httpx.HTTPError as exc:
            logger.error("Chat request failed: {}", exc)
            if streaming and not transcript[-1].content:
                transcript.pop()
            transcript.append(_assistant(GENERIC_ERROR_REPLY))
            return ChatOutcome(ok=False)

    async def usage(self) -> UsageStats:
        """Fetch the server's current usage counter."""
        async with self._client() as client:
            response = await client.get("/api/usage")
            response.raise_for_status()
            return UsageStats.model_validate(response.json())

    @staticmethod
    def _quota_exceeded(transcript: list[ChatMessage], body: bytes) -> ChatOutcome:
        try:
            data = json.loads(body)
            warning = data.get("message") or data.get("error") or GENERIC_ERROR_REPLY
            stats = UsageStats.model_validate(data["stats"]) if data.get("stats") else None
        except (ValueError, AttributeError, ValidationError) as exc:
            logger.error("Unreadable 429 body: {}", exc)
            warning, stats = GENERIC_ERROR_REPLY, None

        logger.warning("Daily usage limit reached: {}", warning)
        transcript.append(_assistant(f"⚠️ {warning}"))
        return ChatOutcome(ok=False, status_code=429, stats=stats)


def _assistant(content: str) -> ChatMessage:
    return ChatMessage(role=MessageRole.ASSISTANT, content=content)


def _append_token(
    transcript: list[ChatMessage], token: str, on_token: Optional[TokenCallback]
) -> None:
    last = transcript[-1]
    transcript[-1] = last.model_copy(update={"content": last.content + token})
    if on_token is not None:
        on_token(token)
