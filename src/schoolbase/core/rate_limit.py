"""
Rate Limiting Module

Per-client-IP rate limiting for the login endpoints, backed by a Redis
sliding window. Falls back to in-memory storage if Redis is unavailable.
"""

import logging
import time

from fastapi import HTTPException, Request, status
from redis.asyncio import Redis

from schoolbase.core.config import settings
from schoolbase.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "Too many requests",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using Redis.

    Uses a sliding window algorithm with Redis sorted sets.

    Args:
        client: Redis client
        key: Rate limit key (e.g., "rate_limit:student-login:10.0.0.1")
        limit: Maximum requests allowed
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _check_rate_limit_memory(
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using in-memory storage.

    Fallback when Redis is unavailable. Only limits within one process.
    """
    now = time.time()
    window_start = now - window_seconds

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    return True


def reset_memory_store() -> None:
    """Forget all in-memory counters."""
    _memory_store.clear()


async def check_rate_limit(
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def client_ip(request: Request) -> str:
    """Peer address of the connection. Client-supplied headers are ignored."""
    return request.client.host if request.client else "unknown"


def login_rate_limit(scope: str, limit: int | None = None, window_seconds: int | None = None):
    """
    Build a FastAPI dependency limiting a login endpoint per client IP.

    Usage:
        @router.post("/login", dependencies=[Depends(login_rate_limit("student-login"))])
        async def login(...):
            ...

    Raises:
        RateLimitExceeded: When the limit is exceeded (HTTP 429 with Retry-After)
    """

    async def dependency(request: Request) -> None:
        max_requests = limit if limit is not None else settings.login_rate_limit
        window = window_seconds if window_seconds is not None else settings.login_rate_window_seconds

        key = f"rate_limit:{scope}:{client_ip(request)}"
        if not await check_rate_limit(key, max_requests, window):
            logger.warning(f"Rate limit exceeded for {key}: {max_requests}/{window}s")
            raise RateLimitExceeded(max_requests, window)

    return dependency


__all__ = [
    "check_rate_limit",
    "login_rate_limit",
    "reset_memory_store",
    "RateLimitExceeded",
]
