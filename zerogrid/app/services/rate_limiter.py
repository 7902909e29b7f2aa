"""
Rate Limiter

Fixed-window request counter persisted in the rate_limits table.

A window opens on the first request for a key and lasts window_ms. Requests
are counted until max_requests is reached; after that the key is refused
until reset_at. Bursts straddling a window boundary can reach twice the
limit; that is accepted. Any failure while counting fails open.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.domain.base import utcnow
from zerogrid.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 100
DEFAULT_WINDOW_MS = 15 * 60 * 1000


class RateLimitConfig(BaseModel):
    max_requests: int = DEFAULT_MAX_REQUESTS
    window_ms: int = DEFAULT_WINDOW_MS


class RateLimitResult(BaseModel):
    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime

    def headers(self) -> Dict[str, str]:
        # reset_at is naive UTC; the header is an ISO-8601 instant with a Z suffix
        reset_iso = self.reset_at.isoformat(timespec="milliseconds") + "Z"
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": reset_iso,
        }


class RateLimiter:
    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def check_limit(
        self, key: str, config: Optional[RateLimitConfig] = None
    ) -> RateLimitResult:
        config = config or RateLimitConfig()
        now = self.clock()
        window_end = now + timedelta(milliseconds=config.window_ms)

        try:
            async with self.uow:
                counter = await self.uow.rate_limits.get_by_key(key)

                # No record or window expired: start a fresh window
                if counter is None or counter.reset_at <= now:
                    await self.uow.rate_limits.start_window(key, window_end)
                    await self.uow.commit()
                    return RateLimitResult(
                        allowed=True,
                        limit=config.max_requests,
                        remaining=config.max_requests - 1,
                        reset_at=window_end,
                    )

                if counter.count >= config.max_requests:
                    return RateLimitResult(
                        allowed=False,
                        limit=config.max_requests,
                        remaining=0,
                        reset_at=counter.reset_at,
                    )

                counter = await self.uow.rate_limits.increment(counter)
                await self.uow.commit()
                return RateLimitResult(
                    allowed=True,
                    limit=config.max_requests,
                    remaining=max(config.max_requests - counter.count, 0),
                    reset_at=counter.reset_at,
                )
        except Exception:
            logger.exception(f"Rate limiter storage error for key {key}, allowing request")
            return RateLimitResult(
                allowed=True,
                limit=config.max_requests,
                remaining=config.max_requests,
                reset_at=window_end,
            )

    async def enforce(
        self, key: str, config: Optional[RateLimitConfig] = None
    ) -> Result[RateLimitResult]:
        """Like check_limit, but a refused request comes back as RATE_LIMIT_EXCEEDED"""
        result = await self.check_limit(key, config)
        if not result.allowed:
            return Return.err(
                Error("RATE_LIMIT_EXCEEDED", "Too many requests. Please try again later.")
            )
        return Return.ok(result)
