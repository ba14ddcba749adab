"""script-guard: structural integrity checks for translated scene scripts.

Recovers translated scripts from exported conversations, classifies
script lines in the original and translated dialects, and validates each
translation line-by-line against its legacy-encoded original.
"""

from __future__ import annotations

from script_guard.classifier import (
    ORIGINAL_MARKERS,
    TRANSLATED_ASCII_MARKERS,
    TRANSLATED_MARKERS,
    ClassifiedLine,
    Dialect,
    DialectMarkers,
    LineKind,
    classify,
)
from script_guard.codec import TextEncoding, decode, detect_encoding, encode, split_lines
from script_guard.exceptions import (
    EncodingDetectionError,
    ScriptEncodingError,
    ScriptGuardError,
    SpeakerRegistryError,
    TranscriptFormatError,
)
from script_guard.models.report import Mismatch, MismatchKind, ValidationResult
from script_guard.models.script import Orientation, ScriptFile, read_script
from script_guard.models.transcript import EntryLocation, TranscriptEntry
from script_guard.orientation import is_vertical
from script_guard.speakers import SpeakerRegistry, load_speaker_registry
from script_guard.tokenizer import parse_entries, parse_entries_file
from script_guard.validator import is_untranslated, validate

__version__ = "0.1.0"

__all__ = [
    "ORIGINAL_MARKERS",
    "TRANSLATED_ASCII_MARKERS",
    "TRANSLATED_MARKERS",
    "ClassifiedLine",
    "Dialect",
    "DialectMarkers",
    "EncodingDetectionError",
    "EntryLocation",
    "LineKind",
    "Mismatch",
    "MismatchKind",
    "Orientation",
    "ScriptEncodingError",
    "ScriptFile",
    "ScriptGuardError",
    "SpeakerRegistry",
    "SpeakerRegistryError",
    "TextEncoding",
    "TranscriptEntry",
    "TranscriptFormatError",
    "ValidationResult",
    "classify",
    "decode",
    "detect_encoding",
    "encode",
    "is_untranslated",
    "is_vertical",
    "load_speaker_registry",
    "parse_entries",
    "parse_entries_file",
    "read_script",
    "split_lines",
    "validate",
]
