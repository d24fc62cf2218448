"""Domain services for account management."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Sequence

from djibgo.modules.profiles import ProfileRepository, ProfileStoreError

from .exceptions import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    InvalidCredentialsError,
    PasswordPolicyError,
    TemporaryPasswordExpiredError,
)
from .models import Account, AccountCreateInput, AuthSession
from .repository import IdentityStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only reads the first 72 bytes and recent releases refuse longer input.
MAX_PASSWORD_BYTES = 72


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def check_password_policy(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordPolicyError(
            f"Le mot de passe doit contenir au moins {MIN_PASSWORD_LENGTH} caractères"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise PasswordPolicyError(
            f"Le mot de passe ne doit pas dépasser {MAX_PASSWORD_BYTES} octets"
        )


class AccountService:
    """Encapsulates sign-in, account creation and password changes."""

    def __init__(
        self,
        identity: IdentityStore,
        profiles: ProfileRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._identity = identity
        self._profiles = profiles
        self._clock = clock

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._identity.get_by_id(account_id)

    async def get_by_email(self, email: str) -> Account | None:
        return await self._identity.find_by_email(email)

    async def list_accounts(self) -> Sequence[Account]:
        return await self._identity.list_accounts()

    async def create_account(self, payload: AccountCreateInput) -> Account:
        check_password_policy(payload.password)
        existing = await self._identity.find_by_email(payload.email)
        if existing is not None:
            raise AccountAlreadyExistsError(f"Un compte existe déjà pour {payload.email}")

        account = await self._identity.create_account(
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
        )
        await self._profiles.create_profile(
            account.id,
            full_name=payload.full_name,
            phone=payload.phone,
        )
        logger.info("Account %s created", account.id)
        return account

    async def authenticate(self, email: str, password: str) -> AuthSession:
        """Open a session, refusing temporary passwords past their expiry."""
        try:
            session = await self._identity.sign_in(email, password)
        except InvalidCredentialsError as exc:
            raise InvalidCredentialsError("Email ou mot de passe incorrect.") from exc

        try:
            profile = await self._profiles.get_profile(session.account_id)
        except ProfileStoreError as exc:
            logger.error("Profile lookup failed after sign-in for %s: %s", session.account_id, exc)
            profile = None

        if profile is not None and profile.temporary_credential_expired(self._clock()):
            await self._identity.sign_out(session.id)
            logger.info("Rejected expired temporary password for account %s", session.account_id)
            raise TemporaryPasswordExpiredError(
                "Votre mot de passe temporaire a expiré. Veuillez en demander un nouveau."
            )
        return session

    async def sign_out(self, session_id: str) -> None:
        await self._identity.sign_out(session_id)

    async def change_password(self, account_id: str, new_password: str, confirm_password: str) -> None:
        if new_password != confirm_password:
            raise PasswordPolicyError("Les mots de passe ne correspondent pas")
        check_password_policy(new_password)

        current = await self._identity.get_by_id(account_id)
        if current is None:
            raise AccountNotFoundError(account_id)

        await self._identity.update_credential(account_id, password=new_password, at=self._clock())
        # Leaving the temporary regime: both bookkeeping fields go together.
        await self._profiles.clear_temporary_credential(account_id)
        logger.info("Password changed for account %s", account_id)
