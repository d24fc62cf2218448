"""Database dependency providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from djibgo.core.config import Settings, get_settings
from djibgo.infrastructure.database.session import get_session_factory as _get_session_factory


def get_session_factory(settings: Settings = Depends(get_settings)) -> async_sessionmaker[AsyncSession]:
    return _get_session_factory(settings)


__all__ = ["get_session_factory"]
