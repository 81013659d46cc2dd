"""Async database connection using SQLAlchemy (supports SQLite and PostgreSQL)."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from svglogos import models  # noqa: F401  registers tables on SQLModel.metadata
from svglogos.config import get_settings

logger = logging.getLogger(__name__)


def get_database_url(url: Optional[str] = None) -> str:
    """Convert database URL to async format."""
    if url is None:
        url = get_settings().DATABASE_URL

    # SQLite
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    # PostgreSQL
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)

    return url


def create_engine(url: Optional[str] = None) -> AsyncEngine:
    """Build an async engine with backend-specific pool settings."""
    database_url = get_database_url(url)

    engine_kwargs = {
        "echo": False,
    }

    if database_url.startswith("sqlite"):
        # SQLite-specific settings
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10
        engine_kwargs["pool_recycle"] = 300

    return create_async_engine(database_url, **engine_kwargs)


def create_session_maker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


_engine: Optional[AsyncEngine] = None
_session_maker: Optional[sessionmaker] = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = create_engine()
    return _engine


def get_session_maker() -> sessionmaker:
    global _session_maker
    if _session_maker is None:
        _session_maker = create_session_maker(get_engine())
    return _session_maker


async def init_db(engine: Optional[AsyncEngine] = None) -> None:
    """Initialize database tables."""
    logger.info("Initializing database tables...")
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables created successfully.")


async def close_db() -> None:
    """Close database connections."""
    global _engine, _session_maker
    if _engine is None:
        return
    logger.info("Closing database connections...")
    await _engine.dispose()
    _engine = None
    _session_maker = None
    logger.info("Database connections closed.")
