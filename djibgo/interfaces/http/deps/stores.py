"""Store dependency providers; tests override these with in-memory fakes."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from djibgo.infrastructure.database.repositories import (
    SqlDeliveryLogRepository,
    SqlIdentityStore,
    SqlProfileRepository,
)
from djibgo.modules.accounts import IdentityStore
from djibgo.modules.deliveries import DeliveryLogRepository
from djibgo.modules.profiles import ProfileRepository

from .database import get_session_factory


def get_identity_store(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> IdentityStore:
    return SqlIdentityStore(factory)


def get_profile_repository(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ProfileRepository:
    return SqlProfileRepository(factory)


def get_delivery_log_repository(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> DeliveryLogRepository:
    return SqlDeliveryLogRepository(factory)


__all__ = [
    "get_delivery_log_repository",
    "get_identity_store",
    "get_profile_repository",
]
