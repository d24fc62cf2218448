"""Repository protocol for the append-only delivery log."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import DeliveryRecord


class DeliveryLogRepository(Protocol):
    async def append_delivery_record(
        self,
        *,
        account_id: str,
        phone_number: str,
        message: str,
        channel: str,
        status: str,
    ) -> DeliveryRecord:
        ...

    async def list_for_account(self, account_id: str) -> Sequence[DeliveryRecord]:
        ...
