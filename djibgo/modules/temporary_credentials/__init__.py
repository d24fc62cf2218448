"""Temporary password issuance, status and reminders."""

from .exceptions import (
    AccountLookupError,
    IssuanceConflictError,
    IssuanceFailedError,
    LookupFailedError,
    MissingFieldError,
    PhoneMismatchError,
    TemporaryCredentialError,
)
from .models import (
    IssuancePolicy,
    ReadBackPolicy,
    ReminderResult,
    TemporaryCredentialIssue,
    TemporaryCredentialStatus,
)
from .service import SUCCESS_MESSAGE, TemporaryCredentialService

__all__ = [
    "AccountLookupError",
    "IssuanceConflictError",
    "IssuanceFailedError",
    "IssuancePolicy",
    "LookupFailedError",
    "MissingFieldError",
    "PhoneMismatchError",
    "ReadBackPolicy",
    "ReminderResult",
    "SUCCESS_MESSAGE",
    "TemporaryCredentialError",
    "TemporaryCredentialIssue",
    "TemporaryCredentialService",
    "TemporaryCredentialStatus",
]
