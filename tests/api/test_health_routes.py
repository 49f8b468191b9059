"""Tests for /health, /ready and the database and Redis helpers behind them."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

import angelic.db.base as db_mod
import angelic.db.redis as redis_mod
from angelic.db.base import async_database_url, engine_options, ping_db
from angelic.db.redis import close_redis, init_redis, ping_redis

pytestmark = pytest.mark.integration


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "healthy", "service": "angelic-backend"}


def test_ready_when_dependencies_answer(api_client: TestClient):
    response = api_client.get("/api/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "checks": {"database": True, "redis": True}}


def test_ready_reports_redis_outage(api_client: TestClient):
    with patch.object(redis_mod._redis, "ping", new=AsyncMock(side_effect=RedisConnectionError("refused"))):
        response = api_client.get("/api/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "degraded", "checks": {"database": True, "redis": False}}


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgres://u:p@db:5432/angelic", "postgresql+asyncpg://u:p@db:5432/angelic"),
        ("postgresql://u:p@db/angelic", "postgresql+asyncpg://u:p@db/angelic"),
        ("sqlite:///./angelic.db", "sqlite+aiosqlite:///./angelic.db"),
        ("postgresql+asyncpg://u:p@db/angelic", "postgresql+asyncpg://u:p@db/angelic"),
    ],
)
def test_database_urls_use_async_drivers(url, expected):
    assert async_database_url(url) == expected


def test_sqlite_engine_skips_pool_options():
    assert engine_options("sqlite+aiosqlite:///./angelic.db") == {"echo": False}
    server = engine_options("postgresql+asyncpg://u:p@db/angelic", debug=True)
    assert server["pool_pre_ping"] is True
    assert server["echo"] is True


async def test_pings_are_false_before_init(monkeypatch):
    monkeypatch.setattr(db_mod, "_session_factory", None)
    monkeypatch.setattr(redis_mod, "_redis", None)

    assert await ping_db() is False
    assert await ping_redis() is False


async def test_unreachable_redis_does_not_block_startup(monkeypatch):
    monkeypatch.setattr(redis_mod, "_redis", None)

    await init_redis("redis://127.0.0.1:1/0")
    try:
        assert redis_mod._redis is not None
        assert await ping_redis() is False
    finally:
        await close_redis()
