"""Credential-less demo provider."""

from __future__ import annotations

import random
from typing import Any, Sequence

import httpx
from loguru import logger

from ..config.llm_config import LlmConfig
from ..models.chat_message import ChatMessage
from ..utils import api_client
from .base import last_user_text

FREE_MODE_REPLY = "Hello! I'm working in free mode."


def canned_replies(last_message: str) -> list[str]:
    return [
        f'I received your message: "{last_message}". I\'m running in free demo mode! '
        "The system is working perfectly.",
        f'Thanks for your message about "{last_message[:30]}...". '
        "I'm a demo AI assistant running on free APIs.",
        f'Your chatbot interface is working great! You asked: "{last_message}". '
        "This is a free demo response.",
    ]


class PublicProvider:
    """Best-effort public endpoint with a canned fallback.

    One unauthenticated call is attempted.  If it fails for any reason a
    reply is picked at random from :func:`canned_replies`, so ``chat``
    never raises.
    """

    def __init__(
        self,
        llm_config: LlmConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.llm_config = llm_config
        self.name = "Free Public AI"
        self._transport = transport
        self._rng = rng or random.Random()

    async def chat(self, messages: Sequence[ChatMessage]) -> str:
        last_message = last_user_text(messages)
        payload = {
            "model": self.llm_config.public_ai_model,
            "prompt": f"User: {last_message}\nAssistant:",
            "max_tokens": 200,
        }
        try:
            response = await api_client.post(
                self.llm_config.public_ai_url,
                json=payload,
                timeout=self.llm_config.timeout,
                transport=self._transport,
            )
            if response.is_success:
                return _generation_text(response.json()).strip() or FREE_MODE_REPLY
            logger.info("Public AI endpoint returned HTTP {}, using fallback", response.status_code)
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as exc:
            logger.info("Public API unavailable, using fallback: {}", exc)

        return self._rng.choice(canned_replies(last_message))


def _generation_text(data: Any) -> str:
    generations = data.get("generations") if isinstance(data, dict) else None
    if isinstance(generations, list) and generations and isinstance(generations[0], dict):
        text = generations[0].get("text")
        if isinstance(text, str):
            return text
    return ""
