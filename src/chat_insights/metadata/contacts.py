"""Short display names for chat participants."""

from __future__ import annotations

import re
from typing import Iterable

_UNWANTED_CHARS = re.compile(r'[~"]')

PHONE_MIN_DIGITS = 5
PHONE_VISIBLE_START = 4
PHONE_VISIBLE_END = 4


def sanitize_name(raw: str) -> str:
    """Remove exporter decorations such as the "~" WhatsApp puts before push names."""
    return _UNWANTED_CHARS.sub("", raw)


def is_phone_number(raw: str) -> bool:
    """A sender counts as a phone number once it carries at least 5 digits."""
    return len(re.sub(r"\D", "", raw)) >= PHONE_MIN_DIGITS


def abbreviate_phone(raw: str) -> str:
    """Keep the first and last four digits: "+4915112345678" -> "+4915....5678"."""
    cleaned = re.sub(r"[\s\-()]", "", raw.strip())
    plus = ""
    if cleaned.startswith("+"):
        plus, cleaned = "+", cleaned[1:]
    if len(cleaned) <= PHONE_VISIBLE_START + PHONE_VISIBLE_END:
        return plus + cleaned
    return f"{plus}{cleaned[:PHONE_VISIBLE_START]}....{cleaned[-PHONE_VISIBLE_END:]}"


def abbreviate_name(full_name: str) -> str:
    """First word in full, the rest as initials: "John Michael Doe" -> "John M. D."."""
    parts = full_name.split()
    if len(parts) <= 1:
        return parts[0] if parts else ""
    return " ".join([parts[0]] + [f"{word[0]}." for word in parts[1:]])


def abbreviate_contact(raw: str) -> str:
    trimmed = raw.strip()
    if is_phone_number(trimmed):
        return abbreviate_phone(trimmed)
    return abbreviate_name(trimmed)


def short_names(senders: Iterable[str]) -> dict[str, str]:
    """Map each distinct sender to a unique short name.

    Collisions are numbered in first-appearance order:
    "John Doe", "John Dee" -> "John D.", "John D. (2)".
    """
    result: dict[str, str] = {}
    seen: dict[str, int] = {}
    for sender in senders:
        if sender in result:
            continue
        base = abbreviate_contact(sanitize_name(sender)) or sender
        seen[base] = seen.get(base, 0) + 1
        result[sender] = base if seen[base] == 1 else f"{base} ({seen[base]})"
    return result
