"""Aggregate metadata over a parsed chat."""

from chat_insights.metadata.builder import build_metadata
from chat_insights.metadata.contacts import short_names
from chat_insights.metadata.models import ChatMetadata

__all__ = [
    "build_metadata",
    "short_names",
    "ChatMetadata",
]
