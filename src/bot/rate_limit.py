"""Rate limiting utilities."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RateLimitStatus:
    """Represents the outcome of a rate limit check."""

    allowed: bool
    remaining: int
    retry_after: int
    limit: int


class RateLimitExceeded(RuntimeError):
    """Raised when a rate limit is exceeded."""

    def __init__(self, status: RateLimitStatus) -> None:
        self.status = status
        super().__init__(f"Rate limit exceeded. Retry in {status.retry_after} seconds")


class RateLimiter(Protocol):
    """Protocol implemented by rate limiter backends."""

    async def hit(self, key: str, limit: int, window: int) -> RateLimitStatus:
        """Register a hit and return the rate limit status."""


class MemoryRateLimiter:
    """A simple in-memory sliding window rate limiter.

    Buckets whose hits have all expired are dropped; idle keys are swept at
    most once per window so memory tracks active users only.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = asyncio.Lock()

    def _sweep(self, threshold: float) -> None:
        expired = [key for key, bucket in self._hits.items() if bucket[-1] <= threshold]
        for key in expired:
            del self._hits[key]
        if expired:
            logger.debug("Rate limit buckets swept", extra={"count": len(expired)})

    async def hit(self, key: str, limit: int, window: int) -> RateLimitStatus:
        now = self._clock()
        threshold = now - window
        async with self._lock:
            if now - self._last_sweep >= window:
                self._sweep(threshold)
                self._last_sweep = now
            bucket = self._hits.get(key)
            if bucket is not None:
                while bucket and bucket[0] <= threshold:
                    bucket.popleft()
                if not bucket:
                    del self._hits[key]
                    bucket = None
            if bucket is not None and len(bucket) >= limit:
                retry_after = max(math.ceil(window - (now - bucket[0])), 1)
                status = RateLimitStatus(
                    allowed=False,
                    remaining=0,
                    retry_after=retry_after,
                    limit=limit,
                )
                logger.debug("Rate limit exceeded", extra={"key": key, "retry_after": retry_after})
                return status
            if bucket is None:
                bucket = self._hits[key] = deque()
            bucket.append(now)
            return RateLimitStatus(
                allowed=True,
                remaining=max(limit - len(bucket), 0),
                retry_after=0,
                limit=limit,
            )


__all__ = [
    "RateLimitStatus",
    "RateLimitExceeded",
    "RateLimiter",
    "MemoryRateLimiter",
]
