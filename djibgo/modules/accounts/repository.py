"""Repository protocol for the identity store."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import Account, AuthSession


class IdentityStore(Protocol):
    """Abstract interface over the external identity store.

    Every method is atomic on its own; nothing spans calls. Failures are
    surfaced as :class:`IdentityStoreError`.
    """

    async def list_accounts(self) -> Sequence[Account]:
        ...

    async def find_by_email(self, email: str) -> Account | None:
        ...

    async def get_by_id(self, account_id: str) -> Account | None:
        ...

    async def create_account(
        self,
        *,
        email: str,
        password: str,
        full_name: str | None,
    ) -> Account:
        ...

    async def update_credential(
        self,
        account_id: str,
        *,
        password: str,
        at: datetime,
        confirm_email: bool = False,
        confirm_phone: bool = False,
        clear_ban: bool = False,
    ) -> Account:
        ...

    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_out(self, session_id: str) -> None:
        ...

    async def get_session(self, session_id: str) -> AuthSession | None:
        ...
