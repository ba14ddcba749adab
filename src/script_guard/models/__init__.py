"""Data models for script-guard."""

from __future__ import annotations

from script_guard.models.report import Mismatch, MismatchKind, ValidationResult
from script_guard.models.script import Orientation, ScriptFile, read_script
from script_guard.models.transcript import (
    ContentBlock,
    ConversationMessage,
    EntryLocation,
    TranscriptEntry,
)

__all__ = [
    "ContentBlock",
    "ConversationMessage",
    "EntryLocation",
    "Mismatch",
    "MismatchKind",
    "Orientation",
    "ScriptFile",
    "TranscriptEntry",
    "ValidationResult",
    "read_script",
]
