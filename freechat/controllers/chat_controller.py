"""Controllers for chat endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse, StreamingResponse
from loguru import logger
from pydantic import ValidationError

from ..models.chat_request import ChatRequest
from ..models.usage import UsageStats
from ..services.chat_service import ChatService, get_chat_service
from ..utils.error_handler import UpstreamError

router = APIRouter(prefix="/api", tags=["Chat"])


@router.post("/chat")
async def chat_endpoint(
    request: Request,
    service: ChatService = Depends(get_chat_service),
) -> Response:
    """Accept a transcript and stream back the assistant's reply.

    The usage gate is checked before the body is read; an exhausted quota
    yields a 429 with usage stats.  On success the body is a sequence of
    ``0:"word "`` lines and the stream ends when the connection closes.
    """
    service.check_quota()

    try:
        chat_request = ChatRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as exc:
        logger.warning("Rejected malformed chat request: {}", exc)
        raise HTTPException(
            status_code=422,
            detail="Request body must be a JSON object with a messages list",
        ) from exc

    try:
        logger.info("Received chat request with {} messages", len(chat_request.messages))
        reply = await service.generate(chat_request)
    except UpstreamError as exc:
        logger.error("Chat API error from {} (status={}): {}", exc.provider, exc.status, exc.detail)
        return PlainTextResponse("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:
        logger.exception("Unhandled exception during chat processing")
        return PlainTextResponse("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return StreamingResponse(service.stream(reply), media_type="text/plain")


@router.get("/usage", response_model=UsageStats)
async def usage_endpoint(
    service: ChatService = Depends(get_chat_service),
) -> UsageStats:
    """Return the current usage counter without consuming quota."""
    return service.get_usage_stats()
