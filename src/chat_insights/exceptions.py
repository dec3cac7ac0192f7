"""Unified exception hierarchy for chat-insights."""


class ChatInsightsError(Exception):
    """Base exception for all chat-insights errors."""


# Transcript
class TranscriptError(ChatInsightsError):
    """Base exception for transcript parsing."""


class UnrecognizedFormatError(TranscriptError):
    """No known exporter format matched enough lines of the transcript."""


class MalformedLineError(TranscriptError):
    """A line's date/time token failed to parse under the committed format."""


class TranscriptReadError(TranscriptError):
    """Failed to read or decode a transcript file."""


# Filters
class FilterError(ChatInsightsError):
    """Base exception for filter operations."""


class FilterCriteriaError(FilterError):
    """Filter criteria are inconsistent or out of range."""


class FilterNotAppliedError(FilterError):
    """A message's active flag was read before any filter pass ran."""


# Execution
class ExecutionError(ChatInsightsError):
    """Base exception for background execution."""


class BackgroundExecutionError(ExecutionError):
    """Background worker was unreachable, threw, or timed out."""

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(message)
        self.kind = kind


class StaleResultError(ExecutionError):
    """Result of a request that a newer request has superseded."""


class WorkerCacheMissError(ExecutionError):
    """Filter worker no longer holds the message set a request refers to."""
