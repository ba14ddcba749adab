"""Shared fixtures for script-guard tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

_ENV_VARS = (
    "ORIGINAL_DIR",
    "TRANSLATED_DIR",
    "TRANSLATED_VERTICAL_DIR",
    "TRANSCRIPT_JSON_DIR",
    "TRANSCRIPT_TEXT_DIR",
    "SPEAKER_MAP",
    "TRANSLATED_SOURCE_MARKER",
    "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all script-guard environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("script_guard.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def write_legacy() -> Callable[[Path, str], Path]:
    """Return a helper that writes *text* to *path* in the legacy encoding."""

    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("cp932"))
        return path

    return _write


@pytest.fixture()
def write_utf8() -> Callable[[Path, str], Path]:
    """Return a helper that writes *text* to *path* as UTF-8."""

    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root logger after each test to prevent handler leaks."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
