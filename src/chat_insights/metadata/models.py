"""Data models for the metadata module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ChatMetadata:
    """Aggregate facts about a full (unfiltered) message set.

    Replaced wholesale whenever a new transcript is loaded.
    """

    file_name: str
    sender_counts: dict[str, int] = field(default_factory=dict)
    sender_short_names: dict[str, str] = field(default_factory=dict)
    first_message_at: datetime | None = None
    last_message_at: datetime | None = None
    language: str = ""
    format: str = ""

    @property
    def total_messages(self) -> int:
        return sum(self.sender_counts.values())

    @property
    def senders(self) -> list[str]:
        """Senders in order of first appearance."""
        return list(self.sender_counts)

    @property
    def is_empty(self) -> bool:
        return not self.sender_counts

    def sender_share(self, sender: str) -> float:
        """Percentage (0-100) of all messages sent by ``sender``."""
        total = self.total_messages
        if not total:
            return 0.0
        return self.sender_counts.get(sender, 0) * 100 / total
