"""
System-wide request quota backed by a shared Redis counter.

Every language model invocation passes through ``RateLimiter.acquire``. The
counter is incremented first and checked afterwards, so rejected attempts
still consume quota and keep raising the reported usage until the window
expires.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Protocol

import redis.asyncio as aioredis

from askdb.config import QuotaSettings, RedisSettings
from askdb.errors import QuotaExceeded

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
DEFAULT_WINDOW_SECONDS = 24 * 60 * 60
DEFAULT_KEY = "llm_request_count_daily"


class CounterStore(Protocol):
    """The subset of the Redis command set the limiter relies on."""

    async def incr(self, name: str, amount: int = 1) -> int: ...

    async def expire(self, name: str, time: int) -> Any: ...

    async def delete(self, *names: str) -> int: ...

    async def get(self, name: str) -> Any: ...

    async def ttl(self, name: str) -> int: ...


def reset_password_matches(expected: str | None, given: str) -> bool:
    """Exact match against the configured reset secret; an unset secret matches nothing."""
    if not expected:
        return False
    return secrets.compare_digest(given.encode(), expected.encode())


def create_counter_store(settings: RedisSettings) -> aioredis.Redis:
    return aioredis.from_url(settings.url, decode_responses=True)


class RateLimiter:
    """Gate on a shared, atomically incremented counter with a rolling expiry."""

    def __init__(
        self,
        counter: CounterStore,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        key: str = DEFAULT_KEY,
    ) -> None:
        self.counter = counter
        self.limit = limit
        self.window_seconds = window_seconds
        self.key = key

    @classmethod
    def from_settings(cls, counter: CounterStore, settings: QuotaSettings) -> RateLimiter:
        return cls(
            counter,
            limit=settings.limit,
            window_seconds=settings.window_seconds,
            key=settings.key,
        )

    async def acquire(self) -> int:
        """
        Count one request against the quota.

        Returns:
            The post-increment counter value

        Raises:
            QuotaExceeded: When the post-increment value exceeds the limit
        """
        count = int(await self.counter.incr(self.key))
        if count == 1:
            # The window starts at first use, not at process start
            await self.counter.expire(self.key, self.window_seconds)
        if count > self.limit:
            logger.warning(
                "Request quota exceeded",
                extra={"current": count, "limit": self.limit},
            )
            raise QuotaExceeded(count, self.limit)
        logger.debug("Request quota acquired", extra={"current": count, "limit": self.limit})
        return count

    async def reset(self) -> None:
        """Clear the counter outright; the next request opens a fresh window."""
        await self.counter.delete(self.key)
        logger.info("Request quota reset", extra={"key": self.key})

    async def usage(self) -> dict[str, int | None]:
        """Current counter value, limit and seconds until the window resets."""
        raw = await self.counter.get(self.key)
        count = int(raw) if raw is not None else 0
        ttl = await self.counter.ttl(self.key)
        return {
            "count": count,
            "limit": self.limit,
            "remaining": max(self.limit - count, 0),
            "ttl": ttl if ttl is not None and ttl >= 0 else None,
        }
