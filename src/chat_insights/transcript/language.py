"""Transcript language detection."""

from __future__ import annotations

import itertools
import logging
from typing import Iterable

from langdetect import DetectorFactory, LangDetectException, detect

logger = logging.getLogger(__name__)

# langdetect is probabilistic; a fixed seed makes detection repeatable
DetectorFactory.seed = 0

SUPPORTED_LANGUAGES = ("de", "en", "fr", "es")
DEFAULT_LANGUAGE = "en"


def detect_language(bodies: Iterable[str], sample_size: int = 100) -> str:
    """Detect the dominant language of the first ``sample_size`` message bodies.

    Returns one of SUPPORTED_LANGUAGES, or DEFAULT_LANGUAGE when the sample is
    empty, undetectable, or in another language.
    """
    sample = " ".join(itertools.islice(bodies, sample_size)).strip()
    if not sample:
        return DEFAULT_LANGUAGE
    try:
        code = detect(sample)
    except LangDetectException:
        logger.debug("Language detection failed, falling back to default")
        return DEFAULT_LANGUAGE
    if code not in SUPPORTED_LANGUAGES:
        logger.debug(f"Detected unsupported language {code!r}, using {DEFAULT_LANGUAGE}")
        return DEFAULT_LANGUAGE
    return code
