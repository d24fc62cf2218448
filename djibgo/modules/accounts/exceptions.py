"""Account domain specific exceptions."""


class AccountError(Exception):
    """Base class for account domain errors."""


class AccountAlreadyExistsError(AccountError):
    """Raised when attempting to create an account with a duplicate email."""


class AccountNotFoundError(AccountError):
    """Raised when the requested account cannot be found."""


class IdentityStoreError(AccountError):
    """Raised when the identity store rejects or fails an operation."""


class InvalidCredentialsError(AccountError):
    """Raised when an email/password pair does not open a session."""


class TemporaryPasswordExpiredError(AccountError):
    """Raised when a sign-in uses a temporary password past its expiry."""


class PasswordPolicyError(AccountError):
    """Raised when a new password is rejected before reaching the store."""
