"""Fixed-window per-IP rate limiting backed by Redis.

Chat: 20 requests / 15 minutes. Report generation: 3 / hour. Both limits come
from Settings. When Redis is unreachable the request is let through and a
warning is logged.
"""

from datetime import UTC, datetime

import structlog
from fastapi import HTTPException, Request
from redis.asyncio import Redis
from redis.exceptions import RedisError

from angelic.core.config import get_settings
from angelic.db.redis import get_redis

logger = structlog.get_logger(__name__)

CHAT_LIMIT_MESSAGE = "请求过于频繁，请稍后再试。Too many requests, please try again later."
REPORT_LIMIT_MESSAGE = "报告生成次数已达上限，请一小时后再试。Report generation limit reached, please try again in an hour."


class RateLimiter:
    """Count hits per client in fixed windows of ``window_seconds``."""

    def __init__(self, redis: Redis, scope: str, limit: int, window_seconds: int):
        self.redis = redis
        self.scope = scope
        self.limit = limit
        self.window_seconds = window_seconds

    def _key(self, client_key: str, now: datetime) -> str:
        window_index = int(now.timestamp()) // self.window_seconds
        return f"ratelimit:{self.scope}:{client_key}:{window_index}"

    async def hit(self, client_key: str, now: datetime | None = None) -> tuple[bool, int, int]:
        """Record one request.

        Args:
            client_key: Caller identity (client IP)
            now: Current time (for deterministic testing)

        Returns:
            Tuple of (allowed, count_in_window, retry_after_seconds)
        """
        now = now or datetime.now(UTC)
        key = self._key(client_key, now)

        count = await self.redis.incr(key)
        ttl = await self.redis.ttl(key)
        if ttl == -1:
            await self.redis.expire(key, self.window_seconds)

        elapsed = int(now.timestamp()) % self.window_seconds
        retry_after = self.window_seconds - elapsed
        return count <= self.limit, count, retry_after


def client_ip(request: Request) -> str:
    """Best-effort caller IP, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


async def _enforce(request: Request, scope: str, limit: int, window_seconds: int, message: str) -> None:
    try:
        limiter = RateLimiter(get_redis(), scope, limit, window_seconds)
        allowed, count, retry_after = await limiter.hit(client_ip(request))
    except (RuntimeError, RedisError) as exc:
        logger.warning("rate_limit_unavailable", scope=scope, error=str(exc), error_type=type(exc).__name__)
        return

    if not allowed:
        logger.info("rate_limit_exceeded", scope=scope, count=count, limit=limit)
        raise HTTPException(
            status_code=429,
            detail=message,
            headers={"Retry-After": str(retry_after)},
        )


async def chat_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the chat limit."""
    settings = get_settings()
    await _enforce(request, "chat", settings.chat_rate_limit, settings.chat_rate_window_seconds, CHAT_LIMIT_MESSAGE)


async def report_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the report-generation limit."""
    settings = get_settings()
    await _enforce(
        request, "report", settings.report_rate_limit, settings.report_rate_window_seconds, REPORT_LIMIT_MESSAGE
    )
