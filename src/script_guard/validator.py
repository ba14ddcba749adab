"""Structural validator for original/translated script pairs.

Translations must keep the original's line structure exactly: the same
number of lines, and at every line number the same role (speech source,
speech content, or normal).  Speaker names are additionally checked
against the :class:`~script_guard.speakers.SpeakerRegistry`.

The validator is pure: it takes two line sequences and returns a
:class:`~script_guard.models.report.ValidationResult`.  File handling
lives in :mod:`script_guard.pipeline`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from script_guard.classifier import (
    ORIGINAL_MARKERS,
    TRANSLATED_MARKERS,
    DialectMarkers,
    LineKind,
    classify,
    has_markers,
)
from script_guard.models.report import Mismatch, MismatchKind, ValidationResult
from script_guard.speakers import SpeakerRegistry


def _distinct_markers(markers: DialectMarkers, other: DialectMarkers) -> DialectMarkers:
    return replace(
        markers,
        source_prefixes=tuple(p for p in markers.source_prefixes if p not in other.source_prefixes),
        content_delimiters=tuple(
            d for d in markers.content_delimiters if d not in other.content_delimiters
        ),
    )


def is_untranslated(
    translated_lines: Sequence[str],
    original_markers: DialectMarkers = ORIGINAL_MARKERS,
    translated_markers: DialectMarkers = TRANSLATED_MARKERS,
) -> bool:
    """Return ``True`` if a translation has not been started yet.

    A file checked out for translation still carries the original's
    markers (``＃``, ``「」``, ``『』``) and none of the translated ones.
    Markers both dialects share, such as the fullwidth ``＃`` prefix, say
    nothing about translation progress and are not counted as translated.
    """
    lines = list(translated_lines)
    return has_markers(lines, original_markers) and not has_markers(
        lines, _distinct_markers(translated_markers, original_markers)
    )


def first_divergence(
    original_lines: Sequence[str],
    translated_lines: Sequence[str],
    trim: bool = False,
    original_markers: DialectMarkers = ORIGINAL_MARKERS,
    translated_markers: DialectMarkers = TRANSLATED_MARKERS,
) -> int | None:
    """Return the 1-based first line whose types differ, over the shared prefix."""
    for index, (original, translated) in enumerate(zip(original_lines, translated_lines)):
        original_kind = classify(original, original_markers, trim).kind
        translated_kind = classify(translated, translated_markers, trim).kind
        if original_kind is not translated_kind:
            return index + 1
    return None


def _check_speaker(
    line_number: int,
    original: str,
    translated: str,
    original_name: str,
    translated_name: str,
    registry: SpeakerRegistry,
) -> Mismatch | None:
    expected = registry.lookup(original_name)
    if expected is None:
        return Mismatch(
            kind=MismatchKind.UNKNOWN_SPEAKER,
            line_number=line_number,
            original_text=original,
            translated_text=translated,
            expected=original_name,
            actual=translated_name,
        )
    if translated_name != expected:
        return Mismatch(
            kind=MismatchKind.SPEAKER_NAME_MISMATCH,
            line_number=line_number,
            original_text=original,
            translated_text=translated,
            expected=expected,
            actual=translated_name,
        )
    return None


def validate(
    original_lines: Sequence[str],
    translated_lines: Sequence[str],
    trim: bool = False,
    registry: SpeakerRegistry | None = None,
    original_markers: DialectMarkers = ORIGINAL_MARKERS,
    translated_markers: DialectMarkers = TRANSLATED_MARKERS,
    diagnose: bool = False,
) -> ValidationResult:
    """Validate a translation against its original, line by line.

    Checks, in order:

    1. **Untranslated**: if the translation uses only original markers
       it is skipped and nothing else is checked.
    2. **Line count**: on a mismatch a single ``line-count-mismatch`` is
       returned and per-line checks are not attempted, because line
       numbers no longer line up.  With *diagnose* the first diverging
       line of the shared prefix is attached as ``line_number``.
    3. **Per line**: every type mismatch is reported, and for speech
       source pairs the original name is resolved through *registry*
       (``unknown-speaker`` / ``speaker-name-mismatch``).

    Args:
        original_lines: Lines of the original script.
        translated_lines: Lines of the translation.
        trim: Strip both sides before classifying (vertical scripts).
        registry: Speaker registry; ``None`` disables name checks.
        original_markers: Marker set of the original dialect.
        translated_markers: Marker set of the translated dialect.
        diagnose: Locate the first divergence on a line-count mismatch.

    Returns:
        The :class:`ValidationResult`.
    """
    if is_untranslated(translated_lines, original_markers, translated_markers):
        return ValidationResult(skipped_as_untranslated=True)

    if len(original_lines) != len(translated_lines):
        hint = None
        if diagnose:
            hint = first_divergence(
                original_lines, translated_lines, trim, original_markers, translated_markers
            )
        mismatch = Mismatch(
            kind=MismatchKind.LINE_COUNT_MISMATCH,
            line_number=hint,
            expected=len(original_lines),
            actual=len(translated_lines),
        )
        return ValidationResult(line_count_ok=False, mismatches=[mismatch])

    mismatches: list[Mismatch] = []
    for index, (original, translated) in enumerate(zip(original_lines, translated_lines)):
        line_number = index + 1
        original_line = classify(original, original_markers, trim)
        translated_line = classify(translated, translated_markers, trim)

        if original_line.kind is not translated_line.kind:
            mismatches.append(
                Mismatch(
                    kind=MismatchKind.TYPE_MISMATCH,
                    line_number=line_number,
                    original_text=original,
                    translated_text=translated,
                    original_kind=original_line.kind,
                    translated_kind=translated_line.kind,
                )
            )
            continue

        if registry is not None and original_line.kind is LineKind.SPEECH_SOURCE:
            speaker_mismatch = _check_speaker(
                line_number,
                original,
                translated,
                original_line.payload,
                translated_line.payload,
                registry,
            )
            if speaker_mismatch is not None:
                mismatches.append(speaker_mismatch)

    return ValidationResult(mismatches=mismatches)
