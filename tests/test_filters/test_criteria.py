"""Tests for filter criteria and defaults."""

from datetime import date, datetime

import pytest

from chat_insights.config import PipelineConfig
from chat_insights.exceptions import FilterCriteriaError
from chat_insights.filters.defaults import cycle_sender_status, default_criteria
from chat_insights.filters.models import WEEKDAYS, FilterCriteria, SenderStatus
from chat_insights.metadata.models import ChatMetadata


def test_defaults():
    criteria = FilterCriteria()
    assert criteria.selected_weekdays == frozenset(WEEKDAYS)
    assert criteria.sender_status == {}
    assert criteria.lower_bound is None and criteria.upper_bound is None


def test_weekdays_coerced_to_frozenset():
    criteria = FilterCriteria(selected_weekdays=["Mon", "Tue", "Mon"])
    assert criteria.selected_weekdays == frozenset({"Mon", "Tue"})


def test_unknown_weekday_rejected():
    with pytest.raises(FilterCriteriaError, match="Unknown weekdays"):
        FilterCriteria(selected_weekdays={"Funday"})


@pytest.mark.parametrize("pct", [-1, 100.5])
def test_percentage_out_of_range(pct):
    with pytest.raises(FilterCriteriaError, match="within"):
        FilterCriteria(min_percentage_per_sender=pct)


def test_start_after_end_rejected():
    with pytest.raises(FilterCriteriaError, match="after end_date"):
        FilterCriteria(start_date=date(2023, 2, 2), end_date=date(2023, 2, 1))


def test_same_day_date_bounds_allowed():
    criteria = FilterCriteria(start_date=date(2023, 2, 1), end_date=date(2023, 2, 1))
    assert criteria.lower_bound == datetime(2023, 2, 1, 0, 0)
    assert criteria.upper_bound.date() == date(2023, 2, 1)
    assert criteria.upper_bound.hour == 23


def test_string_statuses_coerced():
    criteria = FilterCriteria(sender_status={"Alice": "manually-excluded"})
    assert criteria.sender_status["Alice"] is SenderStatus.EXCLUDED


def test_invalid_status_rejected():
    with pytest.raises(FilterCriteriaError, match="Invalid sender status"):
        FilterCriteria(sender_status={"Alice": "maybe"})


def test_sender_status_copied_from_caller():
    statuses = {"Alice": SenderStatus.EXCLUDED}
    criteria = FilterCriteria(sender_status=statuses)
    statuses["Bob"] = SenderStatus.EXCLUDED
    assert "Bob" not in criteria.sender_status


def test_with_sender_status_returns_new_value():
    base = FilterCriteria()
    changed = base.with_sender_status("Alice", SenderStatus.INCLUDED)
    assert base.status_of("Alice") is SenderStatus.AUTO
    assert changed.status_of("Alice") is SenderStatus.INCLUDED
    assert "Alice" not in changed.with_sender_status("Alice", SenderStatus.AUTO).sender_status


def test_cycle_sender_status():
    criteria = FilterCriteria()
    states = []
    for _ in range(4):
        criteria = cycle_sender_status(criteria, "Alice")
        states.append(criteria.status_of("Alice"))
    assert states == [
        SenderStatus.EXCLUDED,
        SenderStatus.INCLUDED,
        SenderStatus.AUTO,
        SenderStatus.EXCLUDED,
    ]


def test_default_criteria_from_metadata():
    meta = ChatMetadata(
        file_name="chat.txt",
        sender_counts={"Alice": 2},
        first_message_at=datetime(2023, 1, 1, 9),
        last_message_at=datetime(2023, 3, 1, 18),
    )
    criteria = default_criteria(meta)
    assert criteria.start_date == datetime(2023, 1, 1, 9)
    assert criteria.end_date == datetime(2023, 3, 1, 18)
    assert criteria.selected_weekdays == frozenset(WEEKDAYS)
    assert criteria.min_percentage_per_sender == 3.0


def test_default_criteria_empty_metadata_unbounded():
    criteria = default_criteria(
        ChatMetadata(file_name="empty.txt"),
        config=PipelineConfig(default_min_percentage=10),
    )
    assert criteria.start_date is None and criteria.end_date is None
    assert criteria.min_percentage_per_sender == 10
