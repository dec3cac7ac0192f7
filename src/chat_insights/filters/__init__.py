"""Composable message filtering."""

from chat_insights.filters.defaults import cycle_sender_status, default_criteria
from chat_insights.filters.engine import (
    active_messages,
    apply_filters,
    resolve_active_senders,
    sender_report,
)
from chat_insights.filters.models import WEEKDAYS, FilterCriteria, SenderStatus, SenderSummary

__all__ = [
    "apply_filters",
    "active_messages",
    "resolve_active_senders",
    "sender_report",
    "default_criteria",
    "cycle_sender_status",
    "FilterCriteria",
    "SenderStatus",
    "SenderSummary",
    "WEEKDAYS",
]
