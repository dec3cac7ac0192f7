"""Parse exported chat transcripts into ordered message records.

Pure parsing: no file or network access. Format detection runs once per
document over a sample of leading lines and the winning descriptor is applied
to every line. Lines that do not start a message continue the previous one.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime

from chat_insights.config import PipelineConfig
from chat_insights.exceptions import MalformedLineError
from chat_insights.transcript.formats import FORMATS, FormatDescriptor
from chat_insights.transcript.ignore_lists import IgnoreListLookup, builtin_ignore_list
from chat_insights.transcript.language import detect_language
from chat_insights.transcript.models import UNKNOWN_FORMAT, Message, ParsedTranscript

logger = logging.getLogger(__name__)

_UNWANTED_UNICODE = re.compile("[\u200e\u200f\u202a-\u202e]")
_ODD_SPACES = re.compile("[\u00a0\u202f]")
_ATTACHMENT = re.compile(r"<attached: [^>]+>|\(file attached\)", re.IGNORECASE)

LANGUAGE_SAMPLE_SIZE = 100


@dataclass
class _PendingMessage:
    timestamp: datetime
    time: str
    sender: str
    lines: list[str] = field(default_factory=list)

    def build(self) -> Message:
        lines = list(self.lines)
        while len(lines) > 1 and not lines[-1]:
            lines.pop()
        body = "\n".join(lines)
        return Message(
            timestamp=self.timestamp,
            time=self.time,
            sender=self.sender,
            body=body,
            has_attachment=bool(_ATTACHMENT.search(body)),
        )


def clean_line(line: str) -> str:
    """Strip directional marks, normalize exotic spaces and trim."""
    line = _UNWANTED_UNICODE.sub("", line)
    line = _ODD_SPACES.sub(" ", line)
    return line.strip()


def split_lines(raw_text: str) -> list[str]:
    """Split raw transcript text into cleaned logical lines."""
    if raw_text.startswith("\ufeff"):
        raw_text = raw_text[1:]
    return [clean_line(line) for line in raw_text.split("\n")]


def _score(descriptor: FormatDescriptor, sample: list[str]) -> int:
    parsed = 0
    for line in sample:
        match = descriptor.match_prefix(line)
        if not match:
            continue
        try:
            descriptor.parse_timestamp(match.group("date"), match.group("time"))
        except MalformedLineError:
            continue
        parsed += 1
    return parsed


def detect_format(
    sample: list[str],
    config: PipelineConfig | None = None,
) -> FormatDescriptor | None:
    """Pick the descriptor that parses the largest share of sample lines.

    The denominator is the number of sample lines carrying any known
    timestamp prefix, so multi-line message bodies do not count against a
    format. The winner must also parse ``detection_min_matches`` lines, or
    half of the sample when the sample is shorter, so a stray timestamp in
    prose is not taken for a chat. Returns None when no descriptor qualifies.
    """
    config = config or PipelineConfig()
    sample = [line for line in sample if line][: config.detection_sample_size]
    required = max(1, min(config.detection_min_matches, (len(sample) + 1) // 2))

    candidates = sum(
        1 for line in sample if any(d.match_prefix(line) for d in FORMATS)
    )
    if candidates < required:
        return None

    best: FormatDescriptor | None = None
    best_parsed = 0
    for descriptor in FORMATS:
        parsed = _score(descriptor, sample)
        if parsed > best_parsed:
            best, best_parsed = descriptor, parsed

    if best is None or best_parsed < required:
        logger.debug(
            f"Only {best_parsed} of {len(sample)} sample lines parsed, need {required}"
        )
        return None

    ratio = best_parsed / candidates
    if ratio < config.detection_min_ratio:
        logger.debug(
            f"Best format {best.name} parsed {best_parsed}/{candidates} "
            f"sample lines, below ratio {config.detection_min_ratio}"
        )
        return None
    return best


def parse_lines(
    lines: list[str],
    descriptor: FormatDescriptor,
) -> tuple[list[Message], int]:
    """Apply a committed format to every line.

    Returns the messages in input order and the number of dropped lines
    (malformed timestamps and orphan continuation lines).
    """
    messages: list[Message] = []
    pending: _PendingMessage | None = None
    dropped = 0

    for line in lines:
        header = descriptor.match_header(line)
        if header:
            if pending:
                messages.append(pending.build())
            try:
                timestamp = descriptor.parse_timestamp(
                    header.group("date"), header.group("time")
                )
            except MalformedLineError as e:
                logger.debug(f"Dropping line: {e}")
                dropped += 1
                pending = None
                continue
            pending = _PendingMessage(
                timestamp=timestamp,
                time=header.group("time"),
                sender=header.group("sender"),
                lines=[header.group("body")],
            )
        elif descriptor.match_prefix(line):
            # Timestamped notice without a sender, e.g. group changes
            if pending:
                messages.append(pending.build())
            pending = None
            logger.debug(f"Skipping system notice: {line[:80]!r}")
        elif pending:
            pending.lines.append(line)
        elif line:
            dropped += 1

    if pending:
        messages.append(pending.build())
    return messages, dropped


def _is_ignored(body: str, ignore: list[str]) -> bool:
    lowered = body.lower()
    return any(entry in lowered for entry in ignore)


def parse_transcript(
    raw_text: str,
    ignore_lists: IgnoreListLookup | None = None,
    config: PipelineConfig | None = None,
) -> ParsedTranscript:
    """Parse an exported chat transcript.

    Never raises for unrecognized input: the result's ``format`` is
    ``"unknown"`` and its message list empty. Use
    ``ParsedTranscript.raise_for_format()`` to turn that into an error.

    Args:
        raw_text: Full transcript text.
        ignore_lists: Lookup ``(language, platform) -> substrings`` of system
            notices to drop. Defaults to the built-in lists.
        config: Detection tunables.
    """
    config = config or PipelineConfig()
    lookup = ignore_lists or builtin_ignore_list

    lines = split_lines(raw_text)
    sample = [line for line in lines if line][: config.detection_sample_size]
    descriptor = detect_format(sample, config)
    if descriptor is None:
        logger.warning("Transcript format not recognized")
        return ParsedTranscript(format=UNKNOWN_FORMAT)

    messages, dropped = parse_lines(lines, descriptor)
    language = detect_language(
        (m.body for m in messages), sample_size=LANGUAGE_SAMPLE_SIZE
    )

    ignore = [entry.lower() for entry in lookup(language, descriptor.platform)]
    kept = [m for m in messages if not _is_ignored(m.body, ignore)]

    logger.info(
        f"Parsed {len(kept)} messages as {descriptor.name} ({language}); "
        f"{len(messages) - len(kept)} ignored, {dropped} lines dropped"
    )
    return ParsedTranscript(
        messages=kept,
        format=descriptor.name,
        platform=descriptor.platform,
        language=language,
        dropped_lines=dropped,
        ignored_messages=len(messages) - len(kept),
    )
