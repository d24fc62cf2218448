"""SQLAlchemy repository for the delivery log."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import select

from djibgo.infrastructure.database.models import DeliveryRecord as DeliveryRecordModel
from djibgo.modules.deliveries.exceptions import DeliveryLogError
from djibgo.modules.deliveries.models import DeliveryRecord
from djibgo.modules.deliveries.repository import DeliveryLogRepository

from .base import TransactionalRepository, as_utc


class SqlDeliveryLogRepository(TransactionalRepository, DeliveryLogRepository):
    store_error = DeliveryLogError

    async def append_delivery_record(
        self,
        *,
        account_id: str,
        phone_number: str,
        message: str,
        channel: str,
        status: str,
    ) -> DeliveryRecord:
        async with self.transaction() as session:
            model = DeliveryRecordModel(
                account_id=account_id,
                phone_number=phone_number,
                message=message,
                channel=channel,
                status=status,
                created_at=datetime.now(timezone.utc),
            )
            session.add(model)
            await session.flush()
            return self._to_domain(model)

    async def list_for_account(self, account_id: str) -> Sequence[DeliveryRecord]:
        stmt = (
            select(DeliveryRecordModel)
            .where(DeliveryRecordModel.account_id == account_id)
            .order_by(DeliveryRecordModel.id)
        )
        async with self.transaction() as session:
            result = await session.execute(stmt)
            return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: DeliveryRecordModel) -> DeliveryRecord:
        return DeliveryRecord(
            id=int(model.id),
            account_id=model.account_id,
            phone_number=model.phone_number,
            message=model.message,
            channel=model.channel,
            status=model.status,
            created_at=as_utc(model.created_at),
        )
