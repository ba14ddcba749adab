"""Configuration loading for script-guard.

Reads settings from environment variables (with .env support via
python-dotenv).  Every setting has a default, so configuration is only
an error when a value is present but invalid.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from script_guard.classifier import TRANSLATED_CONVENTIONS, DialectMarkers
from script_guard.log import resolve_level


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        original_dir: Directory of legacy-encoded original scripts.
        translated_dir: Directory of horizontal translated scripts.
        translated_vertical_dir: Directory of vertical translated scripts.
        transcript_json_dir: Directory of exported conversation JSON.
        transcript_text_dir: Directory of flattened transcripts.
        speaker_map: JSON speaker map, or ``None`` to skip name checks.
        translated_source_marker: Translated speech-source convention,
            ``"fullwidth"`` (``＃``) or ``"ascii"`` (``#``).
        log_level: Logging level (default ``"INFO"``).
    """

    original_dir: Path = Path("original")
    translated_dir: Path = Path("translated")
    translated_vertical_dir: Path = Path("translated-vertical")
    transcript_json_dir: Path = Path("gemini-translation-json")
    transcript_text_dir: Path = Path("gemini-translation-text")
    speaker_map: Path | None = None
    translated_source_marker: str = "fullwidth"
    log_level: str = "INFO"

    @property
    def translated_markers(self) -> DialectMarkers:
        return TRANSLATED_CONVENTIONS[self.translated_source_marker]


_PATH_VARS = {
    "ORIGINAL_DIR": "original_dir",
    "TRANSLATED_DIR": "translated_dir",
    "TRANSLATED_VERTICAL_DIR": "translated_vertical_dir",
    "TRANSCRIPT_JSON_DIR": "transcript_json_dir",
    "TRANSCRIPT_TEXT_DIR": "transcript_text_dir",
    "SPEAKER_MAP": "speaker_map",
}


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the working
    directory is picked up automatically.  Empty or whitespace-only
    variables are treated as unset.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If ``TRANSLATED_SOURCE_MARKER`` or ``LOG_LEVEL`` holds
            an unrecognised value.  The message names **all** invalid
            variables.
    """
    load_dotenv()

    values: dict[str, object] = {}
    for env_var, field_name in _PATH_VARS.items():
        raw = os.environ.get(env_var, "").strip()
        if raw:
            values[field_name] = Path(raw)

    invalid: list[str] = []

    marker = os.environ.get("TRANSLATED_SOURCE_MARKER", "").strip().lower()
    if marker:
        if marker in TRANSLATED_CONVENTIONS:
            values["translated_source_marker"] = marker
        else:
            choices = ", ".join(sorted(TRANSLATED_CONVENTIONS))
            invalid.append(f"TRANSLATED_SOURCE_MARKER={marker!r} (expected one of: {choices})")

    log_level = os.environ.get("LOG_LEVEL", "").strip().upper()
    if log_level:
        try:
            resolve_level(log_level)
        except ValueError:
            invalid.append(f"LOG_LEVEL={log_level!r}")
        else:
            values["log_level"] = log_level

    if invalid:
        raise ConfigError("Invalid configuration: " + "; ".join(invalid))

    return Settings(**values)  # type: ignore[arg-type]
