"""Redis client for the per-IP rate limiter.

Redis is optional at runtime: when it is unreachable the limiter lets requests
through and /api/ready reports it, so startup only warns instead of failing.
"""

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from angelic.core.config import get_settings

logger = structlog.get_logger(__name__)

# Fail fast so a dead Redis costs a request at most this long
SOCKET_TIMEOUT_SECONDS = 2.0

_redis: redis.Redis | None = None


async def init_redis(url: str | None = None) -> None:
    """Create the shared client and check it once. Idempotent."""
    global _redis

    if _redis is not None:
        return

    _redis = redis.from_url(
        url or get_settings().redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=SOCKET_TIMEOUT_SECONDS,
        socket_timeout=SOCKET_TIMEOUT_SECONDS,
        health_check_interval=30,
    )

    if not await ping_redis():
        logger.warning("redis_unreachable_at_startup", effect="rate limits not enforced until it recovers")


async def close_redis() -> None:
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> redis.Redis:
    """Return the shared Redis client.

    Raises RuntimeError if init_redis() has not been called.
    """
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def ping_redis() -> bool:
    """True when Redis answers PING; never raises."""
    try:
        return bool(await get_redis().ping())
    except (RuntimeError, RedisError, OSError) as exc:
        logger.error("redis_ping_failed", error=str(exc), error_type=type(exc).__name__)
        return False
