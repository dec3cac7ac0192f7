"""Load a transcript, derive metadata and defaults, and keep a filtered view.

The session owns the original message set and its metadata. Every filter
request runs against that original set; results computed for a message set
that a newer load has replaced are discarded via the generation counter.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

from chat_insights.config import PipelineConfig
from chat_insights.exceptions import (
    BackgroundExecutionError,
    TranscriptReadError,
    UnrecognizedFormatError,
)
from chat_insights.execution.harness import (
    ExecutionHarness,
    OperationKind,
    Outcome,
    OutcomeStatus,
)
from chat_insights.filters.defaults import cycle_sender_status, default_criteria
from chat_insights.filters.engine import active_messages, sender_report
from chat_insights.filters.models import FilterCriteria, SenderSummary
from chat_insights.metadata.models import ChatMetadata
from chat_insights.transcript.ignore_lists import IgnoreListLookup
from chat_insights.transcript.models import Message

logger = logging.getLogger(__name__)


def _needs_fallback(outcome: Outcome) -> bool:
    return outcome.status == OutcomeStatus.FAILED and isinstance(
        outcome.error, BackgroundExecutionError
    )


def _as_stale(outcome: Outcome) -> Outcome:
    return dataclasses.replace(
        outcome, status=OutcomeStatus.STALE, value=None, error=None
    )


class ChatSession:
    """One loaded chat and its current filter state.

    Args:
        config: Pipeline tunables; read from the environment by default.
        harness: Execution harness; one is created from ``config`` if omitted.
        ignore_lists: Lookup for system notices passed to the parser.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        harness: ExecutionHarness | None = None,
        ignore_lists: IgnoreListLookup | None = None,
    ):
        self.config = config or PipelineConfig.from_env()
        self._harness = harness or ExecutionHarness(self.config)
        self._ignore_lists = ignore_lists
        self._generation = 0
        self._load_token = 0
        self._original: list[Message] = []
        self._messages: list[Message] = []
        self._metadata: ChatMetadata | None = None
        self._criteria: FilterCriteria | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def metadata(self) -> ChatMetadata | None:
        return self._metadata

    @property
    def criteria(self) -> FilterCriteria | None:
        return self._criteria

    @property
    def original_messages(self) -> list[Message]:
        return list(self._original)

    @property
    def messages(self) -> list[Message]:
        """Every message of the chat, flagged by the latest filter pass."""
        return list(self._messages)

    @property
    def active_messages(self) -> list[Message]:
        return active_messages(self._messages)

    def sender_report(self) -> list[SenderSummary]:
        if self._metadata is None or self._criteria is None:
            return []
        return sender_report(
            self._metadata.sender_counts,
            self._criteria,
            self._metadata.sender_short_names,
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_file(self, path: Path) -> Outcome:
        """Read a UTF-8 transcript file and load it."""
        path = Path(path)
        try:
            raw_text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            self._start_load()
            logger.warning(f"Could not read transcript {path}: {e}")
            error = TranscriptReadError(f"Failed to read transcript {path}: {e}")
            error.__cause__ = e
            return Outcome(
                kind=OperationKind.PARSE,
                token=self._harness.latest_token(OperationKind.PARSE),
                status=OutcomeStatus.FAILED,
                error=error,
                background=False,
            )
        return await self.load_text(raw_text, file_name=path.name)

    async def load_text(self, raw_text: str, file_name: str = "") -> Outcome:
        """Parse ``raw_text`` and replace the session's chat with it.

        On success the session holds the new messages, metadata, default
        criteria and a first filter pass. An unrecognized transcript yields a
        failed outcome carrying UnrecognizedFormatError and an empty session.
        """
        load_token = self._start_load()

        outcome = await self._harness.parse(raw_text, file_name, self._ignore_lists)
        if _needs_fallback(outcome):
            logger.warning(f"Background parse failed ({outcome.error}); parsing synchronously")
            outcome = self._harness.parse_sync(raw_text, file_name, self._ignore_lists)

        if outcome.stale or load_token != self._load_token:
            return _as_stale(outcome)
        if not outcome.ok:
            return outcome

        parsed, metadata = outcome.value
        try:
            parsed.raise_for_format()
        except UnrecognizedFormatError as e:
            return dataclasses.replace(
                outcome, status=OutcomeStatus.FAILED, value=None, error=e
            )

        self._replace_messages(parsed.messages, metadata)
        filtered = await self.apply(default_criteria(metadata, config=self.config))
        if filtered.status == OutcomeStatus.FAILED:
            return filtered
        return outcome

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    async def apply(self, criteria: FilterCriteria) -> Outcome:
        """Filter the original message set with ``criteria``.

        Only the latest request is applied; superseded results come back as
        stale outcomes and leave the session untouched.
        """
        version = self._generation
        messages = self._original

        outcome = await self._harness.filter(messages, criteria, version)
        if _needs_fallback(outcome):
            logger.warning(f"Background filter failed ({outcome.error}); filtering synchronously")
            outcome = self._harness.filter_sync(messages, criteria, version)

        if outcome.stale or outcome.version != self._generation:
            return _as_stale(outcome)
        if outcome.ok:
            self._messages = outcome.value
            self._criteria = criteria
        return outcome

    async def reset_filters(self) -> Outcome:
        """Back to the full date range, all weekdays and no overrides."""
        metadata = self._metadata or ChatMetadata(file_name="")
        return await self.apply(default_criteria(metadata, config=self.config))

    async def toggle_sender(self, sender: str) -> Outcome:
        """Cycle a sender's override and re-filter."""
        return await self.apply(cycle_sender_status(self._current_criteria(), sender))

    async def set_min_percentage(self, min_percentage: float) -> Outcome:
        return await self.apply(
            self._current_criteria().replace(min_percentage_per_sender=min_percentage)
        )

    def close(self) -> None:
        self._harness.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _start_load(self) -> int:
        """Invalidate in-flight loads and filters and clear the current chat."""
        self._load_token += 1
        self._generation += 1
        self._original = []
        self._messages = []
        self._metadata = None
        self._criteria = None
        return self._load_token

    def _replace_messages(
        self, messages: list[Message], metadata: ChatMetadata
    ) -> None:
        # New generation: filter requests made while the load was pending ran
        # against the cleared set and must not share its version
        self._generation += 1
        self._original = list(messages)
        self._messages = []
        self._criteria = None
        self._metadata = metadata

    def _current_criteria(self) -> FilterCriteria:
        if self._criteria is not None:
            return self._criteria
        metadata = self._metadata or ChatMetadata(file_name="")
        return default_criteria(metadata, config=self.config)
