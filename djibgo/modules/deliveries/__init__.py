"""Delivery log domain."""

from .exceptions import DeliveryLogError
from .models import STATUS_SENT, WHATSAPP_CHANNEL, DeliveryRecord
from .repository import DeliveryLogRepository

__all__ = [
    "DeliveryLogError",
    "DeliveryLogRepository",
    "DeliveryRecord",
    "STATUS_SENT",
    "WHATSAPP_CHANNEL",
]
