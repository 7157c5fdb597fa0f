"""Models describing the daily usage gate."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UsageStats(BaseModel):
    """Snapshot of the usage counter returned to clients."""

    model_config = ConfigDict(populate_by_name=True)

    used: int
    limit: int
    remaining: int
    reset_time: datetime = Field(..., alias="resetTime")


class QuotaExceededBody(BaseModel):
    """JSON body of a 429 response."""

    error: str = "Daily usage limit reached"
    message: str
    stats: UsageStats


class DailyLimitUpdate(BaseModel):
    """Payload for changing the daily limit at runtime."""

    limit: int = Field(..., gt=0)
