"""Value objects for temporary credential issuance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(slots=True, frozen=True)
class ReadBackPolicy:
    """Bounded exponential backoff for confirming the credential write."""

    attempts: int = 3
    initial_delay: float = 0.25
    multiplier: float = 2.0
    max_delay: float = 2.0

    def delays(self) -> list[float]:
        """Pauses taken before each retry (the first read is immediate)."""
        delays: list[float] = []
        delay = self.initial_delay
        for _ in range(max(self.attempts - 1, 0)):
            delays.append(min(delay, self.max_delay))
            delay *= self.multiplier
        return delays


@dataclass(slots=True, frozen=True)
class IssuancePolicy:
    validity: timedelta = timedelta(hours=24)
    default_country_prefix: str = "+253"
    self_test_enabled: bool = True
    lease_seconds: int = 30
    read_back: ReadBackPolicy = ReadBackPolicy()
    reminder_window: timedelta = timedelta(hours=1)


@dataclass(slots=True, frozen=True)
class TemporaryCredentialIssue:
    """Outcome handed back to the caller; the password only lives inside the link."""

    account_id: str
    whatsapp_url: str
    phone: str
    expires_at: datetime
    self_test_passed: Optional[bool] = None


@dataclass(slots=True, frozen=True)
class TemporaryCredentialStatus:
    active: bool
    expires_at: Optional[datetime] = None
    hours_remaining: float = 0.0


@dataclass(slots=True, frozen=True)
class ReminderResult:
    account_id: str
    status: str
    phone: Optional[str] = None
    whatsapp_url: Optional[str] = None
    error: Optional[str] = None
