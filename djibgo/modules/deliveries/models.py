"""Delivery record domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

WHATSAPP_CHANNEL = "whatsapp"
STATUS_SENT = "sent"


@dataclass(slots=True, frozen=True)
class DeliveryRecord:
    id: int
    account_id: str
    phone_number: str
    message: str
    channel: str
    status: str
    created_at: Optional[datetime] = None
