"""Enumerations used across models."""

from enum import Enum


class MessageRole(str, Enum):
    """Enum for message roles in a conversation.

    Only two roles travel over the wire.  ``USER`` denotes a human
    message and ``ASSISTANT`` denotes a reply from the upstream
    provider.
    """

    USER = "user"
    ASSISTANT = "assistant"
