from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Sequence

import pytest

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from freechat.config.app_config import AppConfig
from freechat.config.llm_config import LlmConfig
from freechat.main import create_app
from freechat.models.chat_message import ChatMessage
from freechat.services.chat_service import ChatService
from freechat.services.usage_tracker import UsageTracker


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeProvider:
    def __init__(self, reply: str = "hello world foo", error: Exception | None = None) -> None:
        self.name = "Fake"
        self.reply = reply
        self.error = error
        self.calls: list[list[ChatMessage]] = []

    async def chat(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def llm_config() -> LlmConfig:
    return LlmConfig(openai_api_key=None, huggingface_api_key=None, _env_file=None)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(stream_delay_ms=0, _env_file=None)


@pytest.fixture
def make_app(clock, llm_config, app_config):
    """Build an app whose provider and daily limit the test controls."""

    def _make(provider=None, daily_limit: int = 50, provider_factory=None):
        tracker = UsageTracker(daily_limit=daily_limit, clock=clock)
        if provider_factory is None:
            provider_factory = lambda config: provider or FakeProvider()  # noqa: E731
        service = ChatService(
            tracker=tracker,
            llm_config=llm_config,
            app_config=app_config,
            provider_factory=provider_factory,
        )
        return create_app(app_config=app_config, chat_service=service)

    return _make
