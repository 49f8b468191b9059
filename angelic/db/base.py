"""Declarative base, the async engine and the readiness ping.

DATABASE_URL may name Postgres (asyncpg, the production default) or SQLite
(aiosqlite, for local runs and tests). Plain ``postgres://`` and
``sqlite://`` URLs, as hosting providers hand them out, are rewritten to
their async drivers.
"""

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from angelic.core.config import get_settings

logger = structlog.get_logger(__name__)

ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def async_database_url(url: str) -> str:
    """Swap a sync driver for its async counterpart; explicit drivers are kept."""
    parsed = make_url(url)
    driver = ASYNC_DRIVERS.get(parsed.drivername)
    if driver is None:
        return url
    return parsed.set(drivername=driver).render_as_string(hide_password=False)


def engine_options(url: str, debug: bool = False) -> dict:
    """SQLite gets the default single-file pool; servers get pre-ping and recycling."""
    options: dict = {"echo": debug}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(pool_pre_ping=True, pool_size=5, max_overflow=10, pool_recycle=1800)
    return options


async def init_db(url: str | None = None) -> None:
    """Create the engine, the session factory and any missing tables. Idempotent."""
    global _engine, _session_factory

    if _engine is not None:
        return

    settings = get_settings()
    db_url = async_database_url(url or settings.database_url)

    _engine = create_async_engine(db_url, **engine_options(db_url, settings.debug))
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Import all models so metadata is populated before create_all
    import angelic.db.models  # noqa: F401

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("db_engine_ready", backend=make_url(db_url).get_backend_name())


async def close_db() -> None:
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the configured session factory.

    Raises RuntimeError if init_db() has not been called.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory


async def ping_db() -> bool:
    """True when a trivial query succeeds; never raises."""
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except (RuntimeError, SQLAlchemyError, OSError) as exc:
        logger.error("db_ping_failed", error=str(exc), error_type=type(exc).__name__)
        return False
    return True
