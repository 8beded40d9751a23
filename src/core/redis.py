"""Redis-backed token revocation and fixed-window rate limiting.

When Redis cannot be reached the process switches to a per-process memory
store for the rest of its lifetime. That is good enough for a single worker
and for tests; multi-worker deployments need a reachable ``REDIS_URL``.
"""
import logging
import time

import redis.asyncio as redis

from src.config.settings import settings

logger = logging.getLogger(__name__)

# key -> (value, expires_at epoch seconds)
_memory_store: dict[str, tuple[int, float]] = {}
_client: redis.Redis | None = None
_memory_only = False


def use_memory_fallback() -> None:
    """Never try Redis; keep everything in process memory."""
    global _memory_only, _client
    _memory_only = True
    _client = None


def clear_memory_store() -> None:
    _memory_store.clear()


async def get_redis() -> redis.Redis | None:
    """Shared Redis client, or None once the memory fallback is active."""
    global _client, _memory_only

    if _memory_only:
        return None
    if _client is not None:
        return _client

    client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        await client.ping()
    except (redis.ConnectionError, redis.TimeoutError, OSError) as e:
        logger.warning("Redis unreachable at %s, falling back to memory: %s", settings.REDIS_URL, e)
        _memory_only = True
        return None

    _client = client
    return _client


def _memory_live(key: str) -> int | None:
    entry = _memory_store.get(key)
    if entry is None:
        return None
    value, expires_at = entry
    if time.time() >= expires_at:
        del _memory_store[key]
        return None
    return value


def _memory_set(key: str, value: int, expires_at: float) -> None:
    """Store a key, dropping every entry whose window has already closed."""
    now = time.time()
    expired = [k for k, (_, at) in _memory_store.items() if now >= at]
    for stale_key in expired:
        del _memory_store[stale_key]
    _memory_store[key] = (value, expires_at)


class TokenBlacklist:
    """Revoked JWTs, kept until the token would have expired anyway."""

    PREFIX = "revoked:"

    @classmethod
    async def add_to_blacklist(cls, token: str, expires_in_seconds: int) -> None:
        key = cls.PREFIX + token
        client = await get_redis()
        if client is None:
            _memory_set(key, 1, time.time() + expires_in_seconds)
            return
        await client.set(key, 1, ex=expires_in_seconds)

    @classmethod
    async def is_blacklisted(cls, token: str) -> bool:
        key = cls.PREFIX + token
        client = await get_redis()
        if client is None:
            return _memory_live(key) is not None
        return bool(await client.exists(key))


class RateLimiter:
    """Fixed-window counters keyed by action and caller.

    The first hit in a window starts a ``window_seconds`` timer; every hit,
    allowed or not, counts.
    """

    PREFIX = "rate:"

    @classmethod
    async def check_rate_limit(
        cls,
        identifier: str,
        action: str,
        max_requests: int,
        window_seconds: int = 3600,
    ) -> tuple[bool, int]:
        """Count one hit and report ``(allowed, hits_in_window)``."""
        key = f"{cls.PREFIX}{action}:{identifier}"
        client = await get_redis()

        if client is not None:
            async with client.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, window_seconds, nx=True)
                count, _ = await pipe.execute()
        else:
            current = _memory_live(key)
            if current is None:
                _memory_set(key, 1, time.time() + window_seconds)
                count = 1
            else:
                count = current + 1
                _memory_store[key] = (count, _memory_store[key][1])

        return count <= max_requests, count
