"""SQLAlchemy implementation of the identity store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete, select

from djibgo.core.security import create_access_token, hash_password, verify_password
from djibgo.infrastructure.database.models import Account as AccountModel
from djibgo.infrastructure.database.models import AuthSession as AuthSessionModel
from djibgo.modules.accounts.exceptions import IdentityStoreError, InvalidCredentialsError
from djibgo.modules.accounts.models import Account, AuthSession
from djibgo.modules.accounts.repository import IdentityStore

from .base import TransactionalRepository, as_utc


class SqlIdentityStore(TransactionalRepository, IdentityStore):
    """Identity store backed by the ``accounts`` and ``auth_sessions`` tables."""

    store_error = IdentityStoreError

    async def list_accounts(self) -> Sequence[Account]:
        async with self.transaction() as session:
            stmt = select(AccountModel).order_by(AccountModel.created_at.desc())
            result = await session.execute(stmt)
            return [self._to_domain(model) for model in result.scalars().all()]

    async def find_by_email(self, email: str) -> Account | None:
        async with self.transaction() as session:
            stmt = select(AccountModel).where(AccountModel.email == email)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._to_domain(model) if model is not None else None

    async def get_by_id(self, account_id: str) -> Account | None:
        async with self.transaction() as session:
            model = await session.get(AccountModel, account_id)
            return self._to_domain(model) if model is not None else None

    async def create_account(
        self,
        *,
        email: str,
        password: str,
        full_name: str | None,
    ) -> Account:
        async with self.transaction() as session:
            model = AccountModel(
                email=email,
                password_hash=hash_password(password),
                full_name=full_name,
                created_at=datetime.now(timezone.utc),
            )
            session.add(model)
            await session.flush()
            return self._to_domain(model)

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
        async with self.transaction() as session:
            model = await session.get(AccountModel, account_id)
            if model is None:
                raise IdentityStoreError(f"User not found: {account_id}")

            model.password_hash = hash_password(password)
            if confirm_email and model.email_confirmed_at is None:
                model.email_confirmed_at = at
            if confirm_phone and model.phone_confirmed_at is None:
                model.phone_confirmed_at = at
            if clear_ban:
                model.banned_until = None
            model.updated_at = at
            await session.flush()
            return self._to_domain(model)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        now = datetime.now(timezone.utc)
        async with self.transaction() as session:
            stmt = select(AccountModel).where(AccountModel.email == email)
            model = (await session.execute(stmt)).scalar_one_or_none()
            if model is None or not verify_password(password, model.password_hash):
                raise InvalidCredentialsError("Invalid login credentials")
            banned_until = as_utc(model.banned_until)
            if banned_until is not None and banned_until > now:
                raise InvalidCredentialsError("User is banned")

            model.last_sign_in_at = now
            session_model = AuthSessionModel(account_id=model.id, created_at=now)
            session.add(session_model)
            await session.flush()
            return AuthSession(
                id=session_model.id,
                account_id=model.id,
                access_token=create_access_token(model.id, session_model.id, model.email),
                created_at=now,
            )

    async def sign_out(self, session_id: str) -> None:
        async with self.transaction() as session:
            await session.execute(delete(AuthSessionModel).where(AuthSessionModel.id == session_id))

    async def get_session(self, session_id: str) -> AuthSession | None:
        async with self.transaction() as session:
            model = await session.get(AuthSessionModel, session_id)
            if model is None:
                return None
            # The token is only handed out once, at sign-in.
            return AuthSession(
                id=model.id,
                account_id=model.account_id,
                access_token="",
                created_at=as_utc(model.created_at),
            )

    @staticmethod
    def _to_domain(model: AccountModel) -> Account:
        return Account(
            id=str(model.id),
            email=model.email,
            password_hash=model.password_hash,
            full_name=model.full_name,
            email_confirmed_at=as_utc(model.email_confirmed_at),
            phone_confirmed_at=as_utc(model.phone_confirmed_at),
            banned_until=as_utc(model.banned_until),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            last_sign_in_at=as_utc(model.last_sign_in_at),
        )
