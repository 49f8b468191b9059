"""Shared test fixtures for all test groups."""

import os

# Set before any angelic module reads settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-session-tokens-0123456789")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ANTHROPIC_API_KEY", "")
os.environ.setdefault("BREVO_API_KEY", "")
os.environ.setdefault("STRIPE_SECRET_KEY", "")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from angelic.agent.llm_fake import LLMFake
from angelic.core.config import get_settings
from angelic.db.base import Base


@pytest.fixture
def llm_fake():
    """Fresh LLMFake with happy_path scenario (default)."""
    return LLMFake(scenario="happy_path")


@pytest.fixture
def llm_fake_failing():
    """LLMFake with llm_failure scenario."""
    return LLMFake(scenario="llm_failure")


@pytest.fixture
def settings_env(monkeypatch):
    """Override settings through the environment for one test.

    Usage::

        settings_env(STRIPE_SECRET_KEY="sk_test_x", REPORT_PAYMENT_REQUIRED="true")
    """

    def _apply(**env: str):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()
        return get_settings()

    yield _apply
    monkeypatch.undo()
    get_settings.cache_clear()


@pytest.fixture
async def session_factory(tmp_path):
    """Session factory over a throwaway SQLite database with all tables created."""
    import angelic.db.models  # noqa: F401

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'unit.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
