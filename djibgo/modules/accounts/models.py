"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Account:
    id: str
    email: str
    password_hash: str = field(repr=False)
    full_name: Optional[str] = None
    email_confirmed_at: Optional[datetime] = None
    phone_confirmed_at: Optional[datetime] = None
    banned_until: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None

    @property
    def email_confirmed(self) -> bool:
        return self.email_confirmed_at is not None

    @property
    def phone_confirmed(self) -> bool:
        return self.phone_confirmed_at is not None

    def is_banned(self, now: datetime) -> bool:
        return self.banned_until is not None and self.banned_until > now


@dataclass(slots=True)
class AuthSession:
    id: str
    account_id: str
    access_token: str = field(repr=False)
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class AccountCreateInput:
    email: str
    password: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
