"""Tests for PipelineConfig."""

import pytest

from chat_insights.config import PipelineConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [
        "DETECTION_SAMPLE_SIZE",
        "DETECTION_MIN_RATIO",
        "DETECTION_MIN_MATCHES",
        "DEFAULT_MIN_PERCENTAGE",
        "TASK_TIMEOUT",
        "USE_BACKGROUND",
    ]:
        monkeypatch.delenv(f"CHAT_INSIGHTS_{name}", raising=False)


def test_defaults():
    config = PipelineConfig.from_env()
    assert config == PipelineConfig()
    assert config.detection_sample_size == 100
    assert config.detection_min_ratio == 0.8
    assert config.default_min_percentage == 3.0
    assert config.use_background is True


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CHAT_INSIGHTS_DETECTION_SAMPLE_SIZE", "50")
    monkeypatch.setenv("CHAT_INSIGHTS_DETECTION_MIN_RATIO", "0.9")
    monkeypatch.setenv("CHAT_INSIGHTS_TASK_TIMEOUT", "2.5")
    monkeypatch.setenv("CHAT_INSIGHTS_USE_BACKGROUND", "off")
    config = PipelineConfig.from_env()
    assert config.detection_sample_size == 50
    assert config.detection_min_ratio == 0.9
    assert config.task_timeout == 2.5
    assert config.use_background is False


def test_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("CHAT_INSIGHTS_DETECTION_SAMPLE_SIZE", "lots")
    monkeypatch.setenv("CHAT_INSIGHTS_DEFAULT_MIN_PERCENTAGE", "three")
    config = PipelineConfig.from_env()
    assert config.detection_sample_size == 100
    assert config.default_min_percentage == 3.0


@pytest.mark.parametrize("raw", ["1", "true", "yes", "on"])
def test_truthy_background_flag(monkeypatch, raw):
    monkeypatch.setenv("CHAT_INSIGHTS_USE_BACKGROUND", raw)
    assert PipelineConfig.from_env().use_background is True


def test_blank_value_uses_default(monkeypatch):
    monkeypatch.setenv("CHAT_INSIGHTS_TASK_TIMEOUT", "  ")
    assert PipelineConfig.from_env().task_timeout == 30.0
