"""Sliding-window request budgets for public endpoints (in-memory and Redis)."""

from __future__ import annotations

import asyncio
import math
import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from langschool.core.config import Settings, get_settings


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    """Outcome of one request against a budget of `limit` hits per window."""

    allowed: bool
    remaining: int
    retry_after: int = 0


class RateLimiter(Protocol):
    """Common contract for budget backends."""

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> RateLimitDecision:
        """Spend one request from the key's budget if any is left."""

    async def clear(self) -> None:
        """Forget every tracked budget."""


def _seconds_until_free(oldest_hit: float, window_seconds: int, now: float) -> int:
    return max(1, math.ceil(oldest_hit + window_seconds - now))


class InMemorySlidingWindowRateLimiter:
    """Per-process budgets; only correct with a single API worker."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._clock = clock

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> RateLimitDecision:
        now = self._clock()
        async with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()

            if len(hits) >= limit:
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    retry_after=_seconds_until_free(hits[0], window_seconds, now),
                )
            hits.append(now)
            return RateLimitDecision(allowed=True, remaining=limit - len(hits))

    async def clear(self) -> None:
        async with self._lock:
            self._hits.clear()


# Scores travel back as strings: Redis truncates Lua numbers to integers.
_REDIS_HIT_SCRIPT = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])

redis.call('ZREMRANGEBYSCORE', key, '-inf', now - window)
local used = redis.call('ZCARD', key)
if used >= limit then
  local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
  return {0, oldest[2] or ARGV[1]}
end

redis.call('ZADD', key, now, ARGV[4])
redis.call('EXPIRE', key, math.ceil(window))
return {1, tostring(limit - used - 1)}
"""


class RedisSlidingWindowRateLimiter:
    """Budgets shared by every API replica through one Redis sorted set per key."""

    def __init__(
        self,
        *,
        redis_url: str,
        namespace: str,
        client: Any | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._redis_url = redis_url
        self._namespace = namespace
        self._client = client
        self._clock = clock
        self._script: Any | None = None
        self._init_lock = asyncio.Lock()

    async def _script_handle(self) -> Any:
        if self._script is not None:
            return self._script
        async with self._init_lock:
            if self._client is None:
                from redis.asyncio import from_url

                self._client = from_url(self._redis_url, encoding="utf-8", decode_responses=True)
            if self._script is None:
                self._script = self._client.register_script(_REDIS_HIT_SCRIPT)
        return self._script

    def namespaced(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> RateLimitDecision:
        script = await self._script_handle()
        now = self._clock()
        admitted, detail = await script(
            keys=[self.namespaced(key)],
            args=[repr(now), window_seconds, limit, f"{now!r}:{id(script)}:{time.perf_counter_ns()}"],
        )
        if int(admitted):
            return RateLimitDecision(allowed=True, remaining=int(detail))
        return RateLimitDecision(
            allowed=False,
            remaining=0,
            retry_after=_seconds_until_free(float(detail), window_seconds, now),
        )

    async def clear(self) -> None:
        """Delete every budget key under this namespace."""
        await self._script_handle()
        async for key in self._client.scan_iter(match=self.namespaced("*"), count=100):
            await self._client.delete(key)


_rate_limiter: RateLimiter | None = None
_rate_limiter_signature: tuple[str, str | None, str] | None = None


def _build_rate_limiter(settings: Settings) -> RateLimiter:
    if settings.intake_rate_limit_backend == "redis":
        return RedisSlidingWindowRateLimiter(
            redis_url=settings.redis_url or "",
            namespace=settings.intake_rate_limit_redis_namespace,
        )
    return InMemorySlidingWindowRateLimiter()


def get_rate_limiter() -> RateLimiter:
    """Return the shared limiter, rebuilt when its backend settings change."""
    global _rate_limiter, _rate_limiter_signature
    settings = get_settings()
    signature = (
        settings.intake_rate_limit_backend,
        settings.redis_url,
        settings.intake_rate_limit_redis_namespace,
    )
    if _rate_limiter is None or _rate_limiter_signature != signature:
        _rate_limiter = _build_rate_limiter(settings)
        _rate_limiter_signature = signature
    return _rate_limiter
