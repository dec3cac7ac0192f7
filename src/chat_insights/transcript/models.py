"""Data models for the transcript module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from chat_insights.exceptions import FilterNotAppliedError, UnrecognizedFormatError

UNKNOWN_FORMAT = "unknown"


@dataclass(frozen=True)
class Message:
    """A single chat message parsed from an exported transcript.

    The parsed fields are immutable. The active flag is owned by the filter
    engine, which hands out copies carrying a fresh flag on every pass.
    """

    timestamp: datetime
    time: str  # time-of-day token as written in the transcript
    sender: str
    body: str
    has_attachment: bool = False
    _active: bool | None = field(default=None, repr=False, compare=False)

    @property
    def is_active(self) -> bool:
        if self._active is None:
            raise FilterNotAppliedError(
                "Message has not been through a filter pass yet; "
                "call apply_filters() before reading is_active."
            )
        return self._active

    @property
    def is_filtered(self) -> bool:
        """True once a filter pass has assigned the active flag."""
        return self._active is not None


@dataclass
class ParsedTranscript:
    """Result of parsing one transcript."""

    messages: list[Message] = field(default_factory=list)
    format: str = UNKNOWN_FORMAT  # descriptor name, or "unknown"
    platform: str = ""  # "ios" | "android"
    language: str = ""
    dropped_lines: int = 0
    ignored_messages: int = 0

    @property
    def ok(self) -> bool:
        return self.format != UNKNOWN_FORMAT

    def raise_for_format(self) -> None:
        """Raise UnrecognizedFormatError if no exporter format was detected."""
        if not self.ok:
            raise UnrecognizedFormatError(
                "Could not parse file: no supported chat export format was recognized."
            )
