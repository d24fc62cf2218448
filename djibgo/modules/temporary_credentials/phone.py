"""Phone number normalisation for matching and WhatsApp delivery."""

from __future__ import annotations

import re

_FORMATTING_CHARS = re.compile(r"[\s\-()]")
_WHITESPACE = re.compile(r"\s+")


def normalize_for_comparison(value: str) -> str:
    """Drop spaces, hyphens, parentheses and one leading ``+``."""
    stripped = _FORMATTING_CHARS.sub("", value)
    if stripped.startswith("+"):
        stripped = stripped[1:]
    return stripped


def phones_match(claimed: str, stored: str) -> bool:
    """Suffix match in either direction, tolerating a missing country code."""
    left = normalize_for_comparison(claimed)
    right = normalize_for_comparison(stored)
    return left == right or left.endswith(right) or right.endswith(left)


def format_for_whatsapp(value: str, default_prefix: str = "+253") -> str:
    phone = _WHITESPACE.sub("", value)
    if not phone.startswith("+"):
        phone = default_prefix + phone.lstrip("0")
    return phone


__all__ = ["format_for_whatsapp", "normalize_for_comparison", "phones_match"]
