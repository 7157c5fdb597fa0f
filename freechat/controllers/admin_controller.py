"""Admin endpoints for the usage gate."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from ..models.usage import DailyLimitUpdate, UsageStats
from ..services.chat_service import ChatService, get_chat_service

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/usage", response_model=UsageStats)
async def usage_endpoint(
    service: ChatService = Depends(get_chat_service),
) -> UsageStats:
    """Return the usage counter for operators."""
    return service.get_usage_stats()


@router.put("/usage/limit", response_model=UsageStats)
async def set_daily_limit_endpoint(
    update: DailyLimitUpdate,
    service: ChatService = Depends(get_chat_service),
) -> UsageStats:
    """Change the daily request limit for the running process."""
    try:
        return service.set_daily_limit(update.limit)
    except ValueError as exc:
        logger.warning("Rejected daily limit {}: {}", update.limit, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
