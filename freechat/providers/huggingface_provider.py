"""Hugging Face inference API provider."""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from loguru import logger

from ..config.llm_config import LlmConfig
from ..models.chat_message import ChatMessage
from ..utils import api_client
from ..utils.error_handler import UpstreamError
from .base import FALLBACK_REPLY

STOP_SEQUENCES = ["\nuser:", "\nhuman:"]
EMPTY_REPLY = "I apologize, but I couldn't generate a proper response."


def build_prompt(messages: Sequence[ChatMessage]) -> str:
    """Flatten the transcript into ``role: content`` lines ending in an assistant cue."""
    conversation = "\n".join(f"{message.role.value}: {message.content}" for message in messages)
    return f"{conversation}\nassistant:"


class HuggingFaceProvider:
    """Text generation through a hosted Hugging Face model.

    The inference API takes a single prompt string, so the transcript is
    flattened with :func:`build_prompt`.  The model echoes the prompt back
    in ``generated_text``; the echo is removed before returning.  Stop
    sequences are requested but the reply is not truncated locally.
    """

    def __init__(
        self,
        llm_config: LlmConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.llm_config = llm_config
        self.name = "Hugging Face Llama"
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.llm_config.huggingface_base_url.rstrip('/')}/{self.llm_config.huggingface_model}"

    async def chat(self, messages: Sequence[ChatMessage]) -> str:
        prompt = build_prompt(messages)
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": 200,
                "temperature": self.llm_config.temperature,
                "stop": STOP_SEQUENCES,
            },
        }
        headers = {"Authorization": f"Bearer {self.llm_config.huggingface_api_key}"}

        try:
            response = await api_client.post(
                self.url,
                json=payload,
                headers=headers,
                timeout=self.llm_config.timeout,
                transport=self._transport,
            )
        except httpx.HTTPError as exc:
            logger.error("{} unreachable: {}", self.name, exc)
            raise UpstreamError(self.name, None, str(exc)) from exc

        if not response.is_success:
            logger.error("{} returned HTTP {}: {}", self.name, response.status_code, response.text)
            raise UpstreamError(self.name, response.status_code, response.reason_phrase)

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(self.name, response.status_code, "invalid JSON body") from exc

        generated = _generated_text(data)
        if generated is None:
            logger.warning("{} response had no generated_text", self.name)
            return FALLBACK_REPLY
        reply = generated.removeprefix(prompt).strip()
        return reply or EMPTY_REPLY


def _generated_text(data: Any) -> str | None:
    if isinstance(data, list) and data and isinstance(data[0], dict):
        data = data[0]
    if isinstance(data, dict) and isinstance(data.get("generated_text"), str):
        return data["generated_text"]
    return None
