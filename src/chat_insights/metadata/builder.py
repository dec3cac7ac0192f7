"""Derive metadata from a parsed message set."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from chat_insights.metadata.contacts import short_names
from chat_insights.metadata.models import ChatMetadata
from chat_insights.transcript.models import Message

logger = logging.getLogger(__name__)


def build_metadata(
    messages: Sequence[Message],
    file_name: str,
    language: str = "",
    format: str = "",
) -> ChatMetadata:
    """Single pass over ``messages``: sender counts, date bounds, short names.

    Deterministic; an empty sequence yields empty counts and no date bounds.
    """
    counts: dict[str, int] = {}
    first: datetime | None = None
    last: datetime | None = None

    for message in messages:
        counts[message.sender] = counts.get(message.sender, 0) + 1
        ts = message.timestamp
        if first is None or ts < first:
            first = ts
        if last is None or ts > last:
            last = ts

    if not counts:
        logger.debug(f"No messages in {file_name!r}; metadata is empty")

    return ChatMetadata(
        file_name=file_name,
        sender_counts=counts,
        sender_short_names=short_names(counts),
        first_message_at=first,
        last_message_at=last,
        language=language,
        format=format,
    )
