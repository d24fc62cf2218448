"""Profile domain models and repository contract."""

from .exceptions import ProfileStoreError
from .models import Profile
from .repository import ProfileRepository

__all__ = ["Profile", "ProfileRepository", "ProfileStoreError"]
