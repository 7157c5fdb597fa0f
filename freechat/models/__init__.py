"""Expose commonly used model classes at the package level.

Importing these classes here allows consumers to write concise imports like::

    from freechat.models import ChatMessage, ChatRequest, UsageStats
"""

from .chat_request import ChatRequest  # noqa: F401
from .chat_message import ChatMessage, FileRef  # noqa: F401
from .enums import MessageRole  # noqa: F401
from .usage import DailyLimitUpdate, QuotaExceededBody, UsageStats  # noqa: F401
from .transcript import Chat, ChatHistory  # noqa: F401
