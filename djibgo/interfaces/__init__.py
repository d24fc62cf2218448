"""Delivery mechanisms (HTTP)."""
