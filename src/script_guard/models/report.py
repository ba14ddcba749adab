"""Validation result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from script_guard.classifier import LineKind


class MismatchKind(str, Enum):
    """Kinds of structural divergence between an original and a translation."""

    TYPE_MISMATCH = "type-mismatch"
    SPEAKER_NAME_MISMATCH = "speaker-name-mismatch"
    UNKNOWN_SPEAKER = "unknown-speaker"
    LINE_COUNT_MISMATCH = "line-count-mismatch"


@dataclass(frozen=True)
class Mismatch:
    """A single divergence found by the validator.

    Attributes:
        kind: What diverged.
        line_number: 1-based line number.  For a line-count mismatch this
            is the first line whose types differ in the overlapping prefix
            (diagnostic mode only), otherwise ``None``.
        original_text: Raw original line, if a line is involved.
        translated_text: Raw translated line, if a line is involved.
        original_kind: Classification of the original line.
        translated_kind: Classification of the translated line.
        expected: Canonical speaker name, or the original line count.
        actual: Translated speaker name, or the translated line count.
    """

    kind: MismatchKind
    line_number: int | None = None
    original_text: str | None = None
    translated_text: str | None = None
    original_kind: LineKind | None = None
    translated_kind: LineKind | None = None
    expected: str | int | None = None
    actual: str | int | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one original/translated pair.

    Attributes:
        line_count_ok: Whether both sides have the same number of lines.
        mismatches: Every divergence, in line order.
        skipped_as_untranslated: The translation still uses original
            markers only, so no comparison was made.
    """

    line_count_ok: bool = True
    mismatches: list[Mismatch] = field(default_factory=list)
    skipped_as_untranslated: bool = False

    @property
    def passed(self) -> bool:
        return not self.skipped_as_untranslated and not self.mismatches
