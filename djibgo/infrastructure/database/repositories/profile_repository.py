"""SQLAlchemy implementation of the profile repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import or_, select, update

from djibgo.infrastructure.database.models import Profile as ProfileModel
from djibgo.modules.profiles.exceptions import ProfileStoreError
from djibgo.modules.profiles.models import Profile
from djibgo.modules.profiles.repository import ProfileRepository

from .base import TransactionalRepository, as_utc


class SqlProfileRepository(TransactionalRepository, ProfileRepository):
    store_error = ProfileStoreError

    async def get_profile(self, account_id: str) -> Profile | None:
        async with self.transaction() as session:
            model = await session.get(ProfileModel, account_id)
            return self._to_domain(model) if model is not None else None

    async def create_profile(
        self,
        account_id: str,
        *,
        full_name: str | None,
        phone: str | None,
    ) -> Profile:
        async with self.transaction() as session:
            model = ProfileModel(
                id=account_id,
                full_name=full_name,
                phone=phone,
                created_at=datetime.now(timezone.utc),
            )
            session.add(model)
            await session.flush()
            return self._to_domain(model)

    async def update_temporary_credential(
        self,
        account_id: str,
        *,
        expires_at: datetime,
        issued_at: datetime,
    ) -> None:
        await self._update(
            account_id,
            temporary_credential_expires_at=expires_at,
            temporary_credential_issued_at=issued_at,
            temporary_credential_reminded_at=None,
        )

    async def clear_temporary_credential(self, account_id: str) -> None:
        await self._update(
            account_id,
            temporary_credential_expires_at=None,
            temporary_credential_issued_at=None,
            temporary_credential_reminded_at=None,
        )

    async def claim_issuance(self, account_id: str, *, now: datetime, lease_until: datetime) -> bool:
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == account_id)
            .where(
                or_(
                    ProfileModel.issuance_lease_until.is_(None),
                    ProfileModel.issuance_lease_until <= now,
                )
            )
            .values(issuance_lease_until=lease_until)
            .execution_options(synchronize_session=False)
        )
        async with self.transaction() as session:
            result = await session.execute(stmt)
            return result.rowcount == 1

    async def release_issuance(self, account_id: str) -> None:
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == account_id)
            .values(issuance_lease_until=None)
            .execution_options(synchronize_session=False)
        )
        async with self.transaction() as session:
            await session.execute(stmt)

    async def list_expiring(self, *, now: datetime, window_end: datetime) -> Sequence[Profile]:
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.temporary_credential_expires_at > now)
            .where(ProfileModel.temporary_credential_expires_at <= window_end)
            .where(ProfileModel.temporary_credential_reminded_at.is_(None))
            .order_by(ProfileModel.temporary_credential_expires_at)
        )
        async with self.transaction() as session:
            result = await session.execute(stmt)
            return [self._to_domain(model) for model in result.scalars().all()]

    async def mark_reminded(self, account_id: str, at: datetime) -> None:
        await self._update(account_id, temporary_credential_reminded_at=at)

    async def _update(self, account_id: str, **values: object) -> None:
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == account_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        async with self.transaction() as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise ProfileStoreError(f"Profile not found: {account_id}")

    @staticmethod
    def _to_domain(model: ProfileModel) -> Profile:
        return Profile(
            id=str(model.id),
            full_name=model.full_name,
            phone=model.phone,
            temporary_credential_expires_at=as_utc(model.temporary_credential_expires_at),
            temporary_credential_issued_at=as_utc(model.temporary_credential_issued_at),
            temporary_credential_reminded_at=as_utc(model.temporary_credential_reminded_at),
            issuance_lease_until=as_utc(model.issuance_lease_until),
        )
