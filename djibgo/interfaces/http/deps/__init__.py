"""Reusable FastAPI dependencies."""

from .auth import get_current_account
from .database import get_session_factory
from .services import build_issuance_policy, get_account_service, get_temporary_credential_service
from .stores import get_delivery_log_repository, get_identity_store, get_profile_repository

__all__ = [
    "build_issuance_policy",
    "get_account_service",
    "get_current_account",
    "get_delivery_log_repository",
    "get_identity_store",
    "get_profile_repository",
    "get_session_factory",
    "get_temporary_credential_service",
]
