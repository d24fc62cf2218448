"""Feature modules and shared exports."""

from . import accounts, deliveries, profiles, temporary_credentials

__all__ = [
    "accounts",
    "deliveries",
    "profiles",
    "temporary_credentials",
]
