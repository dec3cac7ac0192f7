"""Work units executed inside the background worker.

Module-level functions so they can be pickled into a worker process. The
filter worker keeps the last message set it received, so repeated filter
requests against the same set only ship the criteria.
"""

from __future__ import annotations

import logging

from chat_insights.config import PipelineConfig
from chat_insights.exceptions import WorkerCacheMissError
from chat_insights.filters.engine import apply_filters
from chat_insights.filters.models import FilterCriteria
from chat_insights.metadata.builder import build_metadata
from chat_insights.metadata.models import ChatMetadata
from chat_insights.transcript.ignore_lists import IgnoreListLookup
from chat_insights.transcript.models import Message, ParsedTranscript
from chat_insights.transcript.parser import parse_transcript

logger = logging.getLogger(__name__)

_cached_version: int | None = None
_cached_messages: list[Message] = []


def parse_task(
    raw_text: str,
    file_name: str,
    ignore_lists: IgnoreListLookup | None = None,
    config: PipelineConfig | None = None,
) -> tuple[ParsedTranscript, ChatMetadata]:
    """Parse a transcript and build its metadata in one round trip."""
    parsed = parse_transcript(raw_text, ignore_lists=ignore_lists, config=config)
    metadata = build_metadata(
        parsed.messages,
        file_name,
        language=parsed.language,
        format=parsed.format,
    )
    return parsed, metadata


def filter_task(
    version: int,
    criteria: FilterCriteria,
    messages: list[Message] | None = None,
) -> list[Message]:
    """Filter message set ``version``; pass ``messages`` to (re)prime the cache."""
    global _cached_version, _cached_messages
    if messages is not None:
        _cached_version, _cached_messages = version, list(messages)
    elif version != _cached_version:
        raise WorkerCacheMissError(
            f"Worker holds message set {_cached_version}, request needs {version}"
        )
    return apply_filters(_cached_messages, criteria)
