"""Account domain services and models."""

from .models import Account, AccountCreateInput, AuthSession
from .repository import IdentityStore
from .service import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH, AccountService, check_password_policy
from .exceptions import (
    AccountError,
    AccountAlreadyExistsError,
    AccountNotFoundError,
    IdentityStoreError,
    InvalidCredentialsError,
    PasswordPolicyError,
    TemporaryPasswordExpiredError,
)

__all__ = [
    "Account",
    "AccountCreateInput",
    "AuthSession",
    "AccountService",
    "IdentityStore",
    "MAX_PASSWORD_BYTES",
    "MIN_PASSWORD_LENGTH",
    "check_password_policy",
    "AccountError",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
    "IdentityStoreError",
    "InvalidCredentialsError",
    "PasswordPolicyError",
    "TemporaryPasswordExpiredError",
]
