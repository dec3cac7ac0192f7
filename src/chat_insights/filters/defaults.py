"""Initial criteria for a freshly loaded chat and the sender toggle cycle."""

from __future__ import annotations

from chat_insights.config import PipelineConfig
from chat_insights.filters.models import WEEKDAYS, FilterCriteria, SenderStatus
from chat_insights.metadata.models import ChatMetadata

_NEXT_STATUS = {
    SenderStatus.AUTO: SenderStatus.EXCLUDED,
    SenderStatus.EXCLUDED: SenderStatus.INCLUDED,
    SenderStatus.INCLUDED: SenderStatus.AUTO,
}


def default_criteria(
    metadata: ChatMetadata,
    min_percentage: float | None = None,
    config: PipelineConfig | None = None,
) -> FilterCriteria:
    """Full date range, every weekday, no overrides.

    Date bounds stay unset for an empty chat.
    """
    if min_percentage is None:
        min_percentage = (config or PipelineConfig()).default_min_percentage
    return FilterCriteria(
        start_date=metadata.first_message_at,
        end_date=metadata.last_message_at,
        selected_weekdays=frozenset(WEEKDAYS),
        sender_status={},
        min_percentage_per_sender=min_percentage,
    )


def cycle_sender_status(criteria: FilterCriteria, sender: str) -> FilterCriteria:
    """Advance a sender's override: auto -> excluded -> included -> auto."""
    return criteria.with_sender_status(
        sender, _NEXT_STATUS[criteria.status_of(sender)]
    )
