"""Upstream text providers and the selector that chooses between them."""

from .base import Provider  # noqa: F401
from .huggingface_provider import HuggingFaceProvider  # noqa: F401
from .openai_provider import OpenAIProvider  # noqa: F401
from .public_provider import PublicProvider  # noqa: F401
from .selector import select_provider  # noqa: F401
