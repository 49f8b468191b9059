"""API-specific test fixtures."""

from contextlib import asynccontextmanager

import fakeredis.aioredis
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from angelic.agent.llm_fake import LLMFake
from angelic.core.auth import create_access_token


@pytest.fixture
def api_llm():
    """LLMFake injected into every route; tests queue replies on it."""
    return LLMFake(scenario="happy_path")


@pytest.fixture
def api_client(tmp_path, api_llm):
    """FastAPI test client over a SQLite database and an in-memory Redis.

    The database and Redis globals are initialized inside the TestClient's
    own event loop so route handlers can use get_session_factory().
    """
    from fastapi.middleware.cors import CORSMiddleware

    import angelic.db.base as db_mod
    import angelic.db.redis as redis_mod
    from angelic.api.deps import get_llm
    from angelic.api.routes import api_router
    from angelic.core.config import get_settings
    from angelic.db import close_db, init_db
    from angelic.main import register_exception_handlers

    db_url = f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"

    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        """Test lifespan - initialize DB and Redis in TestClient's event loop."""
        db_mod._engine = None
        db_mod._session_factory = None
        await init_db(db_url)
        redis_mod._redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
        yield
        await redis_mod._redis.aclose()
        redis_mod._redis = None
        await close_db()

    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Angelic - Test Client",
        version="0.1.0",
        lifespan=test_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    app.dependency_overrides[get_llm] = lambda: api_llm

    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers():
    """Build Authorization headers carrying a session token for ``user_id``."""

    def _headers(user_id: str, email: str | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id, email)}"}

    return _headers


@pytest.fixture
def registered_user(api_client: TestClient) -> dict:
    """A freshly registered account: its public fields plus auth headers."""
    response = api_client.post(
        "/api/auth/register",
        json={"email": "founder@example.com", "password": "s3cret-pass", "firstName": "Ada"},
    )
    assert response.status_code == 200
    body = response.json()
    # Tests pass identity explicitly; drop the session cookie set by register
    api_client.cookies.clear()
    return {**body["user"], "headers": {"Authorization": f"Bearer {body['token']}"}}
