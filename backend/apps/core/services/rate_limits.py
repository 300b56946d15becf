"""Fixed-window rate limiting shared by the public endpoints."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_BUCKETS = 10_000


@dataclass(frozen=True)
class RateLimitConfig:
    window_seconds: float
    limit: int

    @classmethod
    def from_settings(cls, name: str) -> "RateLimitConfig":
        """Build the config for an endpoint from ``settings.RATE_LIMITS``."""

        values = settings.RATE_LIMITS[name]
        return cls(window_seconds=values["window_seconds"], limit=values["limit"])


@dataclass
class RateLimitBucket:
    count: int
    reset_time: float


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single limiter check."""

    allowed: bool
    remaining: int
    reset_time: float
    limit: int


class InMemoryRateLimiter:
    """Per-key fixed-window counter kept in process memory.

    Each key owns a bucket holding a request count and the timestamp at which
    its window expires. A request arriving after that timestamp replaces the
    bucket instead of incrementing it. The read-check-increment sequence runs
    under a single lock so concurrent requests on one key cannot both claim
    the last slot.

    The table is bounded: once it holds more than ``max_buckets`` entries,
    expired buckets are swept, and if every bucket is still live the least
    recently touched ones are dropped.
    """

    def __init__(
        self,
        *,
        max_buckets: int = DEFAULT_MAX_BUCKETS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._buckets: OrderedDict[str, RateLimitBucket] = OrderedDict()
        self._lock = threading.Lock()
        self._clock = clock
        self.max_buckets = max_buckets

    def check(self, bucket: str, config: RateLimitConfig) -> RateLimitResult:
        with self._lock:
            now = self._clock()
            entry = self._buckets.get(bucket)

            if entry is None or now >= entry.reset_time:
                entry = RateLimitBucket(count=1, reset_time=now + config.window_seconds)
                self._buckets[bucket] = entry
                self._buckets.move_to_end(bucket)
                self._enforce_bound(now)
                return RateLimitResult(
                    allowed=True,
                    remaining=max(config.limit - 1, 0),
                    reset_time=entry.reset_time,
                    limit=config.limit,
                )

            entry.count += 1
            self._buckets.move_to_end(bucket)
            if entry.count > config.limit:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_time=entry.reset_time,
                    limit=config.limit,
                )

            return RateLimitResult(
                allowed=True,
                remaining=config.limit - entry.count,
                reset_time=entry.reset_time,
                limit=config.limit,
            )

    def get_count(self, bucket: str) -> int:
        with self._lock:
            entry = self._buckets.get(bucket)
            if entry is None or self._clock() >= entry.reset_time:
                return 0
            return entry.count

    def __len__(self) -> int:
        return len(self._buckets)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    def _enforce_bound(self, now: float) -> None:
        if len(self._buckets) <= self.max_buckets:
            return

        expired = [key for key, entry in self._buckets.items() if now >= entry.reset_time]
        for key in expired:
            del self._buckets[key]

        evicted = 0
        while len(self._buckets) > self.max_buckets:
            self._buckets.popitem(last=False)
            evicted += 1

        logger.debug(
            "Swept rate limit table: %d expired, %d evicted, %d remaining",
            len(expired),
            evicted,
            len(self._buckets),
        )


def retry_after_seconds(result: RateLimitResult, *, now: Optional[float] = None) -> int:
    """Whole seconds until the window resets, never less than one."""

    current = time.time() if now is None else now
    return max(int(math.ceil(result.reset_time - current)), 1)


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    reset_at = datetime.fromtimestamp(result.reset_time, tz=timezone.utc)
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": reset_at.isoformat().replace("+00:00", "Z"),
    }


_rate_limiter_singleton: Optional[InMemoryRateLimiter] = None
_singleton_lock = threading.Lock()


def build_rate_limiter() -> InMemoryRateLimiter:
    max_buckets = int(getattr(settings, "RATE_LIMIT_MAX_BUCKETS", DEFAULT_MAX_BUCKETS))
    logger.info("Using in-memory rate limiter (max %d buckets)", max_buckets)
    return InMemoryRateLimiter(max_buckets=max_buckets)


def get_rate_limiter() -> InMemoryRateLimiter:
    global _rate_limiter_singleton
    if _rate_limiter_singleton is None:
        with _singleton_lock:
            if _rate_limiter_singleton is None:
                _rate_limiter_singleton = build_rate_limiter()
    return _rate_limiter_singleton


__all__ = [
    "InMemoryRateLimiter",
    "RateLimitBucket",
    "RateLimitConfig",
    "RateLimitResult",
    "get_rate_limiter",
    "rate_limit_headers",
    "retry_after_seconds",
]
