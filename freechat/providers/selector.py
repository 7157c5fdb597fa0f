"""Pick the upstream provider from the configured credentials."""

from __future__ import annotations

from typing import Callable, Optional

from loguru import logger

from ..config.llm_config import LlmConfig, get_llm_config
from .base import Provider
from .huggingface_provider import HuggingFaceProvider
from .openai_provider import OpenAIProvider
from .public_provider import PublicProvider

# name -> (credential lookup, factory)
PROVIDER_CHAIN: dict[str, tuple[Callable[[LlmConfig], Optional[str]], Callable[[LlmConfig], Provider]]] = {
    "openai": (lambda config: config.openai_api_key, OpenAIProvider),
    "huggingface": (lambda config: config.huggingface_api_key, HuggingFaceProvider),
}


def select_provider(llm_config: LlmConfig | None = None) -> Provider:
    """Return the first provider in ``provider_order`` that has a credential.

    Nothing is cached; each call reflects the configuration it is given.
    Without any credential the public demo provider is returned.
    """
    config = llm_config or get_llm_config()
    for key in config.provider_order:
        credential, factory = PROVIDER_CHAIN[key]
        if credential(config):
            provider = factory(config)
            logger.debug("Selected provider {} ({})", provider.name, key)
            return provider
    logger.debug("No provider credentials configured, using public demo provider")
    return PublicProvider(config)
