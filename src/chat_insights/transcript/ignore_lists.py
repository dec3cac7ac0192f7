"""Exporter system notices to drop, keyed by (language, platform).

A lookup is any callable ``(language, platform) -> list[str]``. The parser
drops every message whose body contains one of the returned substrings
(case-insensitive).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from chat_insights.exceptions import TranscriptReadError

logger = logging.getLogger(__name__)

IgnoreListLookup = Callable[[str, str], list[str]]

_COMMON: dict[str, list[str]] = {
    "en": [
        "Messages and calls are end-to-end encrypted",
        "This message was deleted",
        "You deleted this message",
        "created group",
        "changed the group description",
        "changed this group's icon",
        "security code changed",
        "Missed voice call",
        "Missed video call",
    ],
    "de": [
        "Ende-zu-Ende-verschlüssel",
        "Diese Nachricht wurde gelöscht",
        "Du hast diese Nachricht gelöscht",
        "hast den Gruppennamen",
        "hat dich hinzugefügt",
        "sicherheitsnummer",
        "erheitsnummer für alle Mitglieder hat sich geänd",
        "Verpasster Sprachanruf",
        "Verpasster Videoanruf",
    ],
    "fr": [
        "chiffrés de bout en bout",
        "Ce message a été supprimé",
        "Vous avez supprimé ce message",
        "a créé le groupe",
        "Le code de sécurité",
        "Appel vocal manqué",
        "Appel vidéo manqué",
    ],
    "es": [
        "cifrados de extremo a extremo",
        "Se eliminó este mensaje",
        "Eliminaste este mensaje",
        "creó el grupo",
        "código de seguridad",
        "Llamada perdida",
        "Videollamada perdida",
    ],
}

_MEDIA: dict[tuple[str, str], list[str]] = {
    ("en", "ios"): [
        "image omitted",
        "video omitted",
        "audio omitted",
        "sticker omitted",
        "GIF omitted",
        "document omitted",
        "Contact card omitted",
    ],
    ("en", "android"): ["<Media omitted>"],
    ("de", "ios"): [
        "weggelassen",
    ],
    ("de", "android"): ["<Medien ausgeschlossen>", "<Medien weggelassen>"],
    ("fr", "ios"): [
        "image absente",
        "vidéo absente",
        "audio omis",
        "autocollant omis",
        "GIF retiré",
        "document omis",
    ],
    ("fr", "android"): ["<Médias omis>"],
    ("es", "ios"): [
        "imagen omitida",
        "video omitido",
        "audio omitido",
        "sticker omitido",
        "GIF omitido",
        "documento omitido",
    ],
    ("es", "android"): ["<Multimedia omitido>"],
}

DEFAULT_LANGUAGE = "en"


def builtin_ignore_list(language: str, platform: str) -> list[str]:
    """Built-in notices for a language/platform; unknown languages use English."""
    if language not in _COMMON:
        language = DEFAULT_LANGUAGE
    return _COMMON[language] + _MEDIA.get((language, platform), [])


def load_ignore_list(path: Path) -> list[str]:
    """Read a newline-separated ignore list, skipping blank lines."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TranscriptReadError(f"Failed to read ignore list {path}: {e}") from e
    return [line.strip() for line in text.splitlines() if line.strip()]


class DirectoryIgnoreLists:
    """Resolve ``ignore_lines_<language>_<platform>.txt`` files in a directory.

    Falls back to the built-in list when the file for a key is missing.
    Instances are picklable, so they can travel to a background worker.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, language: str, platform: str) -> Path:
        return self.directory / f"ignore_lines_{language}_{platform}.txt"

    def __call__(self, language: str, platform: str) -> list[str]:
        path = self.path_for(language, platform)
        if not path.exists():
            logger.debug(f"No ignore list at {path}, using built-in list")
            return builtin_ignore_list(language, platform)
        return load_ignore_list(path)
