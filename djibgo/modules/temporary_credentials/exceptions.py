"""Temporary credential issuance errors."""


class TemporaryCredentialError(Exception):
    """Base class for issuance errors; the message is user facing."""


class MissingFieldError(TemporaryCredentialError):
    """Raised when the request lacks the email or phone."""


class AccountLookupError(TemporaryCredentialError):
    """Raised when no account or no profile matches the email."""


class PhoneMismatchError(TemporaryCredentialError):
    """Raised when the claimed phone does not match the stored one."""


class LookupFailedError(TemporaryCredentialError):
    """Raised when a store fails before any credential change."""


class IssuanceConflictError(TemporaryCredentialError):
    """Raised when another issuance for the same account holds the lease."""

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class IssuanceFailedError(TemporaryCredentialError):
    """Raised when the identity store rejects the credential update."""
