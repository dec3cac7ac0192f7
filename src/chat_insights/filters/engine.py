"""Filter engine: recompute the active flag of every message.

Stateless and pure: the result depends only on the original message set and
the criteria passed in, never on flags from an earlier pass.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Mapping, Sequence

from chat_insights.filters.models import (
    WEEKDAYS,
    FilterCriteria,
    SenderStatus,
    SenderSummary,
    to_local_naive,
)
from chat_insights.transcript.models import Message

logger = logging.getLogger(__name__)


def count_senders(messages: Sequence[Message]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for message in messages:
        counts[message.sender] = counts.get(message.sender, 0) + 1
    return counts


def meets_threshold(count: int, total: int, min_percentage: float) -> bool:
    """``count / total * 100 >= min_percentage`` without float round-off."""
    if total <= 0:
        return False
    return count * 100 >= min_percentage * total


def resolve_active_senders(
    sender_counts: Mapping[str, int],
    criteria: FilterCriteria,
) -> dict[str, bool]:
    """Decide per sender: overrides first, then the percentage threshold.

    ``sender_counts`` must describe the full, unfiltered message set.
    """
    total = sum(sender_counts.values())
    active: dict[str, bool] = {}
    for sender, count in sender_counts.items():
        status = criteria.status_of(sender)
        if status == SenderStatus.EXCLUDED:
            active[sender] = False
        elif status == SenderStatus.INCLUDED:
            active[sender] = True
        else:
            active[sender] = meets_threshold(
                count, total, criteria.min_percentage_per_sender
            )
    return active


def apply_filters(
    messages: Sequence[Message],
    criteria: FilterCriteria,
) -> list[Message]:
    """Return copies of ``messages`` with ``is_active`` recomputed.

    ``messages`` is the original, unfiltered set: its size is the denominator
    of the percentage rule. Nothing is dropped and order is preserved; the
    input objects are left untouched.
    """
    active_senders = resolve_active_senders(count_senders(messages), criteria)
    lower, upper = criteria.lower_bound, criteria.upper_bound
    weekdays = {WEEKDAYS.index(day) for day in criteria.selected_weekdays}

    result: list[Message] = []
    active_count = 0
    for message in messages:
        ts = to_local_naive(message.timestamp)
        is_active = (
            (lower is None or ts >= lower)
            and (upper is None or ts <= upper)
            and ts.weekday() in weekdays
            and active_senders.get(message.sender, False)
        )
        active_count += is_active
        result.append(dataclasses.replace(message, _active=is_active))

    logger.debug(f"Filter pass: {active_count}/{len(result)} messages active")
    return result


def active_messages(messages: Sequence[Message]) -> list[Message]:
    """The subset consumers chart; requires a prior filter pass."""
    return [m for m in messages if m.is_active]


def sender_report(
    sender_counts: Mapping[str, int],
    criteria: FilterCriteria,
    short_names: Mapping[str, str] | None = None,
) -> list[SenderSummary]:
    """Per-sender share, override and resolved state, busiest sender first."""
    total = sum(sender_counts.values())
    active = resolve_active_senders(sender_counts, criteria)
    short_names = short_names or {}
    summaries = [
        SenderSummary(
            sender=sender,
            short_name=short_names.get(sender, sender),
            message_count=count,
            share=count * 100 / total if total else 0.0,
            status=criteria.status_of(sender),
            is_active=active[sender],
        )
        for sender, count in sender_counts.items()
    ]
    summaries.sort(key=lambda s: -s.message_count)
    return summaries
