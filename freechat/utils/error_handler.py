"""Error handling utilities and custom exceptions."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from ..models.usage import QuotaExceededBody, UsageStats


class ChatError(Exception):
    """Exception raised when a chat operation fails."""

    pass


class QuotaExceededError(ChatError):
    """Raised when the daily request limit has been reached."""

    def __init__(self, stats: UsageStats) -> None:
        self.stats = stats
        super().__init__(
            "You've used {used}/{limit} requests today. Limit resets at {reset}".format(
                used=stats.used,
                limit=stats.limit,
                reset=stats.reset_time.strftime("%m/%d/%Y, %I:%M:%S %p %Z"),
            )
        )

    def to_body(self) -> QuotaExceededBody:
        return QuotaExceededBody(message=str(self), stats=self.stats)


class UpstreamError(ChatError):
    """Raised when a text provider fails over HTTP or the network.

    ``status`` is ``None`` when no HTTP response was received.
    """

    def __init__(self, provider: str, status: int | None = None, detail: str = "") -> None:
        self.provider = provider
        self.status = status
        self.detail = detail
        message = f"{provider} API error"
        if status is not None:
            message += f": {status}"
        if detail:
            message += f" {detail}"
        super().__init__(message)


class FileValidationError(ChatError):
    """Raised when an attachment is too large or of an unsupported type."""

    def __init__(self, file_name: str, reason: str) -> None:
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"{file_name}: {reason}")


async def quota_exception_handler(request: Request, exc: QuotaExceededError) -> JSONResponse:
    """Convert a QuotaExceededError into an HTTP 429 response."""
    logger.warning("Daily usage limit reached: {}/{}", exc.stats.used, exc.stats.limit)
    return JSONResponse(
        status_code=429,
        content=exc.to_body().model_dump(mode="json", by_alias=True),
    )


async def http_exception_handler(request: Request, exc: ChatError) -> PlainTextResponse:
    """Convert any other ChatError into an HTTP 500 response."""
    if isinstance(exc, UpstreamError):
        logger.error("Upstream provider {} failed (status={}): {}", exc.provider, exc.status, exc.detail)
    else:
        logger.error("ChatError occurred: {}", exc)
    return PlainTextResponse("Internal Server Error", status_code=500)
