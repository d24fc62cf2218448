"""Profile store exceptions."""


class ProfileStoreError(Exception):
    """Raised when the profile store fails a read or write."""
