"""Temporary password generation."""

from __future__ import annotations

import secrets

LOWEST = 100000
HIGHEST = 999999


def generate_temporary_password() -> str:
    """Return a uniformly drawn six digit code from a CSPRNG."""
    return str(LOWEST + secrets.randbelow(HIGHEST - LOWEST + 1))
