"""Exported chat transcript parsing."""

from chat_insights.transcript.formats import FORMATS, FormatDescriptor, get_format
from chat_insights.transcript.ignore_lists import DirectoryIgnoreLists, builtin_ignore_list
from chat_insights.transcript.models import UNKNOWN_FORMAT, Message, ParsedTranscript
from chat_insights.transcript.parser import detect_format, parse_transcript

__all__ = [
    "parse_transcript",
    "detect_format",
    "FORMATS",
    "FormatDescriptor",
    "get_format",
    "DirectoryIgnoreLists",
    "builtin_ignore_list",
    "Message",
    "ParsedTranscript",
    "UNKNOWN_FORMAT",
]
