"""OpenAI chat completions through LangChain's ChatOpenAI."""

from __future__ import annotations

from typing import Any, Sequence

import openai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_openai import ChatOpenAI
from loguru import logger

from ..config.llm_config import LlmConfig
from ..models.chat_message import ChatMessage
from ..models.enums import MessageRole
from ..utils.error_handler import UpstreamError
from .base import FALLBACK_REPLY, describe_attachment


class OpenAIProvider:
    """Send the whole transcript to the OpenAI chat completions API.

    The model is built from :class:`LlmConfig` the same way every time:
    API key, model name and temperature always, base URL and timeout only
    when configured.  SDK retries are disabled so one chat request maps to
    one upstream call.
    """

    def __init__(self, llm_config: LlmConfig, llm: Any | None = None) -> None:
        self.llm_config = llm_config
        self.name = f"OpenAI {llm_config.openai_model}"

        if llm is None:
            llm_kwargs: dict[str, object] = {
                "api_key": llm_config.openai_api_key,
                "model": llm_config.openai_model,
                "temperature": llm_config.temperature,
                "max_tokens": llm_config.openai_max_completion_tokens,
                "max_retries": 0,
            }
            if llm_config.openai_base_url:
                llm_kwargs["base_url"] = llm_config.openai_base_url
            if llm_config.timeout:
                llm_kwargs["timeout"] = llm_config.timeout
            llm = ChatOpenAI(**llm_kwargs)
        self.llm = llm

    async def chat(self, messages: Sequence[ChatMessage]) -> str:
        try:
            result = await self.llm.ainvoke(to_langchain_messages(messages))
        except openai.APIStatusError as exc:
            logger.error("{} returned HTTP {}: {}", self.name, exc.status_code, exc.message)
            raise UpstreamError(self.name, exc.status_code, exc.message) from exc
        except openai.APIConnectionError as exc:
            logger.error("{} unreachable: {}", self.name, exc)
            raise UpstreamError(self.name, None, str(exc)) from exc

        text = _message_text(result)
        if not text:
            logger.warning("{} returned no completion text", self.name)
            return FALLBACK_REPLY
        return text


def to_langchain_messages(messages: Sequence[ChatMessage]) -> list[BaseMessage]:
    """Map transcript messages to LangChain messages.

    User attachments become extra content parts: images as data URLs,
    everything else as text.
    """
    converted: list[BaseMessage] = []
    for message in messages:
        if message.role == MessageRole.ASSISTANT:
            converted.append(AIMessage(content=message.content))
            continue
        if not message.attachments:
            converted.append(HumanMessage(content=message.content))
            continue
        parts: list[dict[str, Any]] = [{"type": "text", "text": message.content}]
        for attachment in message.attachments:
            if attachment.mime_type.startswith("image/"):
                parts.append(
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{attachment.mime_type};base64,{attachment.base64_content}"
                        },
                    }
                )
            else:
                parts.append({"type": "text", "text": describe_attachment(attachment)})
        converted.append(HumanMessage(content=parts))
    return converted


def _message_text(result: Any) -> str:
    content = getattr(result, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    return ""
