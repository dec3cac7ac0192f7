"""Tests for transcript format descriptors."""

from datetime import datetime

import pytest

from chat_insights.exceptions import MalformedLineError
from chat_insights.transcript.formats import FORMATS, get_format


def test_descriptor_names_are_unique():
    names = [d.name for d in FORMATS]
    assert len(names) == len(set(names))


def test_dmy_24h_two_digit_year():
    fmt = get_format("android_dmy_24h")
    assert fmt.parse_timestamp("01.02.23", "14:05") == datetime(2023, 2, 1, 14, 5)


def test_dmy_24h_four_digit_year_and_dash_separator():
    fmt = get_format("android_dmy_24h")
    assert fmt.parse_timestamp("01-02-2023", "14:05:09") == datetime(2023, 2, 1, 14, 5, 9)


def test_mdy_12h_pm():
    fmt = get_format("android_mdy_12h")
    assert fmt.parse_timestamp("2/1/23", "2:05 PM") == datetime(2023, 2, 1, 14, 5)


def test_12h_midnight_is_hour_zero():
    fmt = get_format("ios_mdy_12h")
    assert fmt.parse_timestamp("2/1/23", "12:30:00 AM") == datetime(2023, 2, 1, 0, 30)


def test_12h_spanish_meridiem():
    fmt = get_format("android_dmy_12h")
    assert fmt.parse_timestamp("01/02/23", "2:05 p. m.") == datetime(2023, 2, 1, 14, 5)


def test_ymd():
    fmt = get_format("android_ymd_24h")
    assert fmt.parse_timestamp("2023-02-01", "09:30") == datetime(2023, 2, 1, 9, 30)


def test_invalid_day_raises():
    fmt = get_format("android_dmy_24h")
    with pytest.raises(MalformedLineError, match="Invalid dmy date"):
        fmt.parse_timestamp("31.02.23", "10:00")


def test_month_first_rejects_day_first_date():
    fmt = get_format("android_mdy_24h")
    with pytest.raises(MalformedLineError):
        fmt.parse_timestamp("25.12.23", "10:00")


def test_12h_hour_out_of_range():
    fmt = get_format("android_mdy_12h")
    with pytest.raises(MalformedLineError, match="12-hour"):
        fmt.parse_timestamp("2/1/23", "13:05 PM")


def test_24h_hour_out_of_range():
    fmt = get_format("android_dmy_24h")
    with pytest.raises(MalformedLineError, match="24-hour"):
        fmt.parse_timestamp("01.02.23", "24:00")


def test_header_requires_sender():
    fmt = get_format("android_dmy_24h")
    line = "01.02.23, 14:00 - Bob added Carol"
    assert fmt.match_header(line) is None
    assert fmt.match_prefix(line) is not None


def test_unknown_format_name():
    with pytest.raises(KeyError):
        get_format("telegram")
