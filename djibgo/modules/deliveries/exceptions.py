"""Delivery log exceptions."""


class DeliveryLogError(Exception):
    """Raised when a delivery record cannot be appended or read."""
