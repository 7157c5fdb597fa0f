"""In-memory daily request counter.

The tracker is created once by :func:`freechat.main.create_app` and lives
on ``app.state``.  It is never persisted, so a restart gives a fresh
quota.  "Daily" means a rolling 24 hours since the last observed reset,
not calendar midnight.

The counter is not synchronised.  Under concurrent load two requests may
both pass the gate; this is acceptable for the single-user demo setting
the server targets.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from loguru import logger

from ..models.usage import UsageStats

WINDOW = timedelta(hours=24)
DEFAULT_DAILY_LIMIT = 50


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UsageTracker:
    """Count requests against a rolling 24 hour window.

    Parameters
    ----------
    daily_limit: int
        Number of requests allowed per window.  Must be positive.
    clock: Callable[[], datetime], optional
        Source of the current time.  Tests pass a controllable clock.
    """

    def __init__(
        self,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if daily_limit <= 0:
            raise ValueError("daily_limit must be positive")
        self._clock = clock or _utcnow
        self.daily_limit = daily_limit
        self.request_count = 0
        self.window_start = self._clock()

    def _check_reset(self) -> None:
        now = self._clock()
        if now - self.window_start > WINDOW:
            self.request_count = 0
            self.window_start = now
            logger.info("Usage tracker reset for new day")

    def can_make_request(self) -> bool:
        """Return True while the window still has quota left."""
        self._check_reset()
        return self.request_count < self.daily_limit

    def record_request(self) -> None:
        """Count one accepted request.

        Callers check :meth:`can_make_request` first; this method does not
        enforce the limit itself.
        """
        self._check_reset()
        self.request_count += 1
        logger.info("API request {}/{} made today", self.request_count, self.daily_limit)

    def get_remaining_requests(self) -> int:
        self._check_reset()
        return max(0, self.daily_limit - self.request_count)

    def get_usage_stats(self) -> UsageStats:
        self._check_reset()
        return UsageStats(
            used=self.request_count,
            limit=self.daily_limit,
            remaining=max(0, self.daily_limit - self.request_count),
            reset_time=self.window_start + WINDOW,
        )

    def set_daily_limit(self, limit: int) -> None:
        """Change the limit without touching the current count."""
        if limit <= 0:
            raise ValueError("daily_limit must be positive")
        self.daily_limit = limit
        logger.info("Daily limit updated to {} requests", limit)
