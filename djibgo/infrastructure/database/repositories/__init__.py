"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlIdentityStore
from .delivery_repository import SqlDeliveryLogRepository
from .profile_repository import SqlProfileRepository

__all__ = [
    "SqlDeliveryLogRepository",
    "SqlIdentityStore",
    "SqlProfileRepository",
]
