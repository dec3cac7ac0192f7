"""Data models for the filters module."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Mapping

from chat_insights.exceptions import FilterCriteriaError

# Index matches datetime.weekday()
WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class SenderStatus(str, Enum):
    """Per-sender override; senders without an entry are AUTO."""

    AUTO = "auto-active"
    EXCLUDED = "manually-excluded"
    INCLUDED = "manually-included"


def to_local_naive(value: datetime) -> datetime:
    """Aware datetimes are converted to local wall-clock time; naive ones pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _lower_bound(value: date | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    return datetime.combine(value, time.min)


def _upper_bound(value: date | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    return datetime.combine(value, time.max)


@dataclass(frozen=True)
class FilterCriteria:
    """Complete, immutable filter specification.

    Build a new value for every change (``replace`` / ``with_sender_status``)
    instead of mutating fields one by one.

    Args:
        start_date: Inclusive lower bound. A ``date`` means the start of that day.
        end_date: Inclusive upper bound. A ``date`` means the end of that day.
        selected_weekdays: Subset of WEEKDAYS to keep.
        sender_status: Manual overrides; missing senders are AUTO.
        min_percentage_per_sender: Share (0-100) of the full message set an
            AUTO sender needs to be active.
    """

    start_date: date | datetime | None = None
    end_date: date | datetime | None = None
    selected_weekdays: frozenset[str] = frozenset(WEEKDAYS)
    sender_status: Mapping[str, SenderStatus] = field(default_factory=dict)
    min_percentage_per_sender: float = 0.0

    def __post_init__(self):
        weekdays = frozenset(self.selected_weekdays)
        unknown = weekdays - set(WEEKDAYS)
        if unknown:
            raise FilterCriteriaError(
                f"Unknown weekdays {sorted(unknown)}; expected a subset of {list(WEEKDAYS)}"
            )
        object.__setattr__(self, "selected_weekdays", weekdays)

        try:
            statuses = {
                sender: SenderStatus(status)
                for sender, status in self.sender_status.items()
            }
        except ValueError as e:
            raise FilterCriteriaError(f"Invalid sender status: {e}") from e
        object.__setattr__(self, "sender_status", statuses)

        pct = self.min_percentage_per_sender
        if not 0 <= pct <= 100:
            raise FilterCriteriaError(
                f"min_percentage_per_sender must be within [0, 100], got {pct}"
            )

        lower, upper = self.lower_bound, self.upper_bound
        if lower is not None and upper is not None and lower > upper:
            raise FilterCriteriaError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )

    @property
    def lower_bound(self) -> datetime | None:
        return _lower_bound(self.start_date)

    @property
    def upper_bound(self) -> datetime | None:
        return _upper_bound(self.end_date)

    def status_of(self, sender: str) -> SenderStatus:
        return self.sender_status.get(sender, SenderStatus.AUTO)

    def replace(self, **changes) -> "FilterCriteria":
        return dataclasses.replace(self, **changes)

    def with_sender_status(self, sender: str, status: SenderStatus) -> "FilterCriteria":
        """New criteria with one override changed; AUTO removes the override."""
        statuses = dict(self.sender_status)
        if status == SenderStatus.AUTO:
            statuses.pop(sender, None)
        else:
            statuses[sender] = SenderStatus(status)
        return self.replace(sender_status=statuses)


@dataclass(frozen=True)
class SenderSummary:
    """Filter-panel view of one sender."""

    sender: str
    short_name: str
    message_count: int
    share: float  # percentage of the full message set
    status: SenderStatus
    is_active: bool

    @property
    def is_locked(self) -> bool:
        """AUTO sender kept out by the percentage threshold."""
        return self.status == SenderStatus.AUTO and not self.is_active
