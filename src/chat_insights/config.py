"""Runtime tunables, overridable through CHAT_INSIGHTS_* environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ENV_PREFIX = "CHAT_INSIGHTS_"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{name}={raw!r}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{name}={raw!r}, using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class PipelineConfig:
    """Tunables for format detection, filter defaults and background execution.

    Args:
        detection_sample_size: Non-empty leading lines inspected to pick a format.
        detection_min_ratio: Share of header-shaped sample lines a format must
            parse for it to be committed.
        detection_min_matches: Fewer parsed lines than this means the
            transcript is not recognized. Samples shorter than twice this
            need half their non-empty lines parsed instead.
        default_min_percentage: Initial per-sender share threshold (0-100).
        task_timeout: Seconds before a background operation is reported failed.
        use_background: Run parse/filter work off the calling thread.
    """

    detection_sample_size: int = 100
    detection_min_ratio: float = 0.8
    detection_min_matches: int = 5
    default_min_percentage: float = 3.0
    task_timeout: float = 30.0
    use_background: bool = True

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        defaults = cls()
        return cls(
            detection_sample_size=_env_int(
                "DETECTION_SAMPLE_SIZE", defaults.detection_sample_size
            ),
            detection_min_ratio=_env_float(
                "DETECTION_MIN_RATIO", defaults.detection_min_ratio
            ),
            detection_min_matches=_env_int(
                "DETECTION_MIN_MATCHES", defaults.detection_min_matches
            ),
            default_min_percentage=_env_float(
                "DEFAULT_MIN_PERCENTAGE", defaults.default_min_percentage
            ),
            task_timeout=_env_float("TASK_TIMEOUT", defaults.task_timeout),
            use_background=_env_bool("USE_BACKGROUND", defaults.use_background),
        )
