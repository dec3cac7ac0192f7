"""Tests for transcript language detection."""

from langdetect import LangDetectException

from chat_insights.transcript import language
from chat_insights.transcript.language import detect_language


def test_empty_sample_defaults_to_english(monkeypatch):
    def fail(text):
        raise AssertionError("detector should not run on empty input")

    monkeypatch.setattr(language, "detect", fail)
    assert detect_language([]) == "en"
    assert detect_language(["", "  "]) == "en"


def test_supported_language_is_returned(monkeypatch):
    monkeypatch.setattr(language, "detect", lambda text: "de")
    assert detect_language(["Guten Morgen", "Wie geht es dir?"]) == "de"


def test_unsupported_language_falls_back(monkeypatch):
    monkeypatch.setattr(language, "detect", lambda text: "it")
    assert detect_language(["Buongiorno"]) == "en"


def test_detector_failure_falls_back(monkeypatch):
    def boom(text):
        raise LangDetectException(0, "No features in text.")

    monkeypatch.setattr(language, "detect", boom)
    assert detect_language(["1234"]) == "en"


def test_only_sample_size_bodies_are_used(monkeypatch):
    seen = []

    def capture(text):
        seen.append(text)
        return "en"

    monkeypatch.setattr(language, "detect", capture)
    detect_language((f"m{i}" for i in range(500)), sample_size=3)
    assert seen == ["m0 m1 m2"]
