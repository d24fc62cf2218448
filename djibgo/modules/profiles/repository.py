"""Repository protocol for profiles."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import Profile


class ProfileRepository(Protocol):
    async def get_profile(self, account_id: str) -> Profile | None:
        ...

    async def create_profile(
        self,
        account_id: str,
        *,
        full_name: str | None,
        phone: str | None,
    ) -> Profile:
        ...

    async def update_temporary_credential(
        self,
        account_id: str,
        *,
        expires_at: datetime,
        issued_at: datetime,
    ) -> None:
        ...

    async def clear_temporary_credential(self, account_id: str) -> None:
        ...

    async def claim_issuance(self, account_id: str, *, now: datetime, lease_until: datetime) -> bool:
        """Take the per-account issuance lease; ``False`` while another unexpired lease exists."""
        ...

    async def release_issuance(self, account_id: str) -> None:
        ...

    async def list_expiring(self, *, now: datetime, window_end: datetime) -> Sequence[Profile]:
        """Profiles whose temporary credential expires in ``(now, window_end]`` and were not reminded."""
        ...

    async def mark_reminded(self, account_id: str, at: datetime) -> None:
        ...
