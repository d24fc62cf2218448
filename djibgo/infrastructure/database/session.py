"""Async SQLAlchemy engine and session management."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from djibgo.core.config import Settings, get_settings
from djibgo.infrastructure.database.base import Base

_engine: AsyncEngine | None = None
AsyncSessionFactory: async_sessionmaker[AsyncSession] | None = None


def build_engine(url: str, *, echo: bool = False, **engine_kwargs: Any) -> AsyncEngine:
    return create_async_engine(url, echo=echo, future=True, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


def _build_engine(settings: Settings) -> AsyncEngine:
    engine_kwargs: dict[str, Any] = {}
    if settings.database.pool_size is not None:
        engine_kwargs["pool_size"] = settings.database.pool_size
    if settings.database.max_overflow is not None:
        engine_kwargs["max_overflow"] = settings.database.max_overflow

    return build_engine(
        settings.database_url,
        echo=settings.database.echo or settings.debug,
        **engine_kwargs,
    )


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    global _engine, AsyncSessionFactory
    if _engine is None:
        _engine = _build_engine(settings or get_settings())
        AsyncSessionFactory = build_session_factory(_engine)
    return _engine


def get_session_factory(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    if AsyncSessionFactory is None:
        get_engine(settings)

    assert AsyncSessionFactory is not None  # for mypy
    return AsyncSessionFactory


async def create_tables(engine: AsyncEngine) -> None:
    # Import for the side effect of registering tables on the metadata.
    from djibgo.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db(settings: Settings | None = None) -> None:
    """Create database tables in development mode (migrations preferred)."""
    await create_tables(get_engine(settings))


async def dispose_engine() -> None:
    global _engine, AsyncSessionFactory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    AsyncSessionFactory = None
