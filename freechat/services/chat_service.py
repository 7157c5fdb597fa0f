"""Orchestration service for the usage-gated chat pipeline.

The ChatService checks the usage gate, counts the request, asks the
selected provider for a reply and hands back the reply as a word-by-word
byte stream.  It centralises the policy so controllers can remain thin.
"""

from __future__ import annotations

from typing import AsyncIterator, Callable

from fastapi import Request
from loguru import logger

from ..config.app_config import AppConfig, get_app_config
from ..config.llm_config import LlmConfig, get_llm_config
from ..models.chat_request import ChatRequest
from ..models.usage import UsageStats
from ..providers import Provider, select_provider
from ..utils.error_handler import QuotaExceededError
from ..utils.streaming import word_stream
from .usage_tracker import UsageTracker


class ChatService:
    """Coordinates the usage tracker, provider selection and streaming.

    Parameters
    ----------
    tracker: UsageTracker
        The process-wide counter.  One instance is shared by every request.
    llm_config: LlmConfig, optional
        Credentials consulted on every request to pick a provider.
    app_config: AppConfig, optional
        Supplies the inter-chunk streaming delay.
    provider_factory: Callable[[LlmConfig], Provider], optional
        Replaces :func:`select_provider`; tests use it to inject fakes.
    """

    def __init__(
        self,
        tracker: UsageTracker,
        llm_config: LlmConfig | None = None,
        app_config: AppConfig | None = None,
        provider_factory: Callable[[LlmConfig], Provider] | None = None,
    ) -> None:
        self.tracker = tracker
        self.llm_config = llm_config or get_llm_config()
        self.app_config = app_config or get_app_config()
        self._provider_factory = provider_factory or select_provider

    def check_quota(self) -> None:
        """Raise :class:`QuotaExceededError` when the daily limit is used up."""
        if not self.tracker.can_make_request():
            raise QuotaExceededError(self.tracker.get_usage_stats())

    async def generate(self, chat_request: ChatRequest) -> str:
        """Count the request and return the provider's full reply.

        The request is counted before the provider is called, so a failed
        upstream call still uses up quota.  Provider errors propagate.
        """
        self.tracker.record_request()
        provider = self._provider_factory(self.llm_config)
        logger.info("Using AI provider: {}", provider.name)
        reply = await provider.chat(chat_request.messages)
        logger.debug("Provider {} returned {} characters", provider.name, len(reply))
        return reply

    def stream(self, reply: str) -> AsyncIterator[bytes]:
        """Return the wire-format byte stream for a finished reply."""
        return word_stream(reply, delay=self.app_config.stream_delay)

    def get_usage_stats(self) -> UsageStats:
        return self.tracker.get_usage_stats()

    def set_daily_limit(self, limit: int) -> UsageStats:
        self.tracker.set_daily_limit(limit)
        return self.tracker.get_usage_stats()


def get_chat_service(request: Request) -> ChatService:
    """Dependency injector for the app's ChatService.

    The service is built once in :func:`freechat.main.create_app` and
    stored on ``app.state``.
    """
    return request.app.state.chat_service
