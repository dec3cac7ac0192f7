"""Tests for exception hierarchy."""

from chat_insights.exceptions import (
    BackgroundExecutionError,
    ChatInsightsError,
    ExecutionError,
    FilterCriteriaError,
    FilterError,
    FilterNotAppliedError,
    MalformedLineError,
    StaleResultError,
    TranscriptError,
    TranscriptReadError,
    UnrecognizedFormatError,
    WorkerCacheMissError,
)


def test_all_inherit_from_base():
    for exc_class in [
        TranscriptError, UnrecognizedFormatError, MalformedLineError, TranscriptReadError,
        FilterError, FilterCriteriaError, FilterNotAppliedError,
        ExecutionError, BackgroundExecutionError, StaleResultError, WorkerCacheMissError,
    ]:
        assert issubclass(exc_class, ChatInsightsError)


def test_transcript_hierarchy():
    assert issubclass(UnrecognizedFormatError, TranscriptError)
    assert issubclass(MalformedLineError, TranscriptError)
    assert issubclass(TranscriptReadError, TranscriptError)


def test_filter_hierarchy():
    assert issubclass(FilterCriteriaError, FilterError)
    assert issubclass(FilterNotAppliedError, FilterError)


def test_execution_hierarchy():
    assert issubclass(BackgroundExecutionError, ExecutionError)
    assert issubclass(StaleResultError, ExecutionError)
    assert issubclass(WorkerCacheMissError, ExecutionError)


def test_exception_message():
    e = MalformedLineError("test error")
    assert str(e) == "test error"


def test_background_error_kind():
    e = BackgroundExecutionError("filter timed out", kind="filter")
    assert str(e) == "filter timed out"
    assert e.kind == "filter"
    assert BackgroundExecutionError("x").kind is None
