"""Password hashing and JWT helpers for sign-in sessions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from djibgo.core.config import get_settings
from djibgo.schemas import TokenData


class InvalidTokenError(Exception):
    """Raised when an access token cannot be decoded or is incomplete."""


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a plain text password with bcrypt using the configured cost."""
    cost = rounds or get_settings().security.bcrypt_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(cost)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage counts as a failed check.
        return False


def create_access_token(
    account_id: str,
    session_id: str,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    settings = get_settings()
    expire_delta = expires_delta or settings.security.access_token_lifetime
    payload = {
        "sub": account_id,
        "sid": session_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + expire_delta,
    }
    return jwt.encode(payload, settings.security.secret_key, algorithm=settings.security.algorithm)


def decode_access_token(token: str) -> TokenData:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.security.secret_key, algorithms=[settings.security.algorithm])
    except JWTError as exc:
        raise InvalidTokenError("Could not validate credentials") from exc

    account_id = payload.get("sub")
    session_id = payload.get("sid")
    email = payload.get("email")
    if not all([account_id, session_id, email]):
        raise InvalidTokenError("Could not validate credentials")
    return TokenData(account_id=account_id, session_id=session_id, email=email)


__all__ = [
    "InvalidTokenError",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
