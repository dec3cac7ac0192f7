"""Exporter format descriptors and date/time token parsing.

Each descriptor pairs a line pattern with the conventions needed to turn its
date and time tokens into a datetime:

    [01.02.23, 14:05:32] Alice: Hello          ios_dmy_24h
    [2/1/23, 2:05:32 PM] Alice: Hello          ios_mdy_12h
    01.02.23, 14:05 - Alice: Hello             android_dmy_24h
    2/1/23, 2:05 PM - Alice: Hello             android_mdy_12h
    2023-02-01 14:05 - Alice: Hello            android_ymd_24h

The order of FORMATS is the tie-break when several descriptors parse a
sample equally well.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time

from dateutil import parser as date_parser

from chat_insights.exceptions import MalformedLineError

_DATE_DM = r"(?P<date>\d{1,2}[./-]\d{1,2}[./-](?:\d{4}|\d{2}))"
_DATE_YMD = r"(?P<date>\d{4}[./-]\d{1,2}[./-]\d{1,2})"
_TIME_24H = r"(?P<time>\d{1,2}:\d{2}(?::\d{2})?)"
_TIME_12H = r"(?P<time>\d{1,2}:\d{2}(?::\d{2})?\s?[AaPp]\.?\s?[Mm]\.?)"

_SENDER_BODY = r"(?P<sender>.+?): (?P<body>.*)$"

_DATE_SPLIT = re.compile(r"[./-]")
_MERIDIEM = re.compile(r"\s?([AaPp])\.?\s?[Mm]\.?$")


@dataclass(frozen=True)
class FormatDescriptor:
    """One exporter format: line layout, date order and clock convention."""

    name: str
    platform: str  # "ios" | "android"
    date_order: str  # "dmy" | "mdy" | "ymd"
    clock: str  # "24h" | "12h"
    prefix: re.Pattern
    header: re.Pattern

    def match_header(self, line: str) -> re.Match | None:
        """Match a line that starts a new message (timestamp, sender, body)."""
        return self.header.match(line)

    def match_prefix(self, line: str) -> re.Match | None:
        """Match any line carrying this format's timestamp prefix."""
        return self.prefix.match(line)

    def parse_timestamp(self, date_token: str, time_token: str) -> datetime:
        """Combine date and time tokens; raises MalformedLineError if invalid."""
        day = self._parse_date(date_token)
        return self._parse_time(time_token, day)

    def _parse_date(self, token: str) -> date:
        parts = _DATE_SPLIT.split(token)
        if len(parts) != 3:
            raise MalformedLineError(f"Unexpected date token {token!r}")

        if self.date_order == "dmy":
            day_s, month_s, year_s = parts
        elif self.date_order == "mdy":
            month_s, day_s, year_s = parts
        else:
            year_s, month_s, day_s = parts

        year = int(year_s)
        if len(year_s) == 2:
            year += 2000
        elif len(year_s) != 4:
            raise MalformedLineError(f"Unexpected year in date token {token!r}")

        try:
            return date(year, int(month_s), int(day_s))
        except ValueError as e:
            raise MalformedLineError(
                f"Invalid {self.date_order} date {token!r}: {e}"
            ) from e

    def _parse_time(self, token: str, day: date) -> datetime:
        hour = int(token.split(":", 1)[0])
        if self.clock == "12h":
            if not 1 <= hour <= 12:
                raise MalformedLineError(f"Invalid 12-hour time {token!r}")
            # "2:05 p. m." -> "2:05 PM"
            token = _MERIDIEM.sub(lambda m: f" {m.group(1).upper()}M", token)
        elif hour > 23:
            raise MalformedLineError(f"Invalid 24-hour time {token!r}")

        try:
            return date_parser.parse(token, default=datetime.combine(day, time()))
        except (ValueError, OverflowError) as e:
            raise MalformedLineError(f"Invalid time {token!r}: {e}") from e


def _descriptor(platform: str, date_order: str, clock: str) -> FormatDescriptor:
    date_re = _DATE_YMD if date_order == "ymd" else _DATE_DM
    time_re = _TIME_12H if clock == "12h" else _TIME_24H
    if platform == "ios":
        prefix = rf"^\[{date_re},? {time_re}\] "
    else:
        prefix = rf"^{date_re},? {time_re} - "
    return FormatDescriptor(
        name=f"{platform}_{date_order}_{clock}",
        platform=platform,
        date_order=date_order,
        clock=clock,
        prefix=re.compile(prefix),
        header=re.compile(prefix + _SENDER_BODY),
    )


FORMATS: tuple[FormatDescriptor, ...] = (
    _descriptor("ios", "dmy", "24h"),
    _descriptor("ios", "mdy", "12h"),
    _descriptor("ios", "dmy", "12h"),
    _descriptor("ios", "mdy", "24h"),
    _descriptor("android", "dmy", "24h"),
    _descriptor("android", "mdy", "12h"),
    _descriptor("android", "dmy", "12h"),
    _descriptor("android", "mdy", "24h"),
    _descriptor("android", "ymd", "24h"),
)


def get_format(name: str) -> FormatDescriptor:
    """Look up a descriptor by name."""
    for descriptor in FORMATS:
        if descriptor.name == name:
            return descriptor
    raise KeyError(f"Unknown transcript format {name!r}")
