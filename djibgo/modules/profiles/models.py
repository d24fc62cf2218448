"""Domain models for user profiles."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Profile:
    id: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    temporary_credential_expires_at: Optional[datetime] = None
    temporary_credential_issued_at: Optional[datetime] = None
    temporary_credential_reminded_at: Optional[datetime] = None
    issuance_lease_until: Optional[datetime] = None

    def has_active_temporary_credential(self, now: datetime) -> bool:
        expires_at = self.temporary_credential_expires_at
        return expires_at is not None and expires_at > now

    def temporary_credential_expired(self, now: datetime) -> bool:
        expires_at = self.temporary_credential_expires_at
        return expires_at is not None and expires_at <= now
