"""Console formatters for script-guard results.

Each ``format_*`` function builds a list of lines and returns the joined
string; :func:`print_validation_report` writes validation output straight
to stdout.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from script_guard.models.report import Mismatch, MismatchKind
from script_guard.pipeline import CorpusReport, CoverageReport, FileOutcome, FileStatus
from script_guard.speakers import SpeakerAudit, SpeakerUsage

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _format_mismatch(mismatch: Mismatch) -> list[str]:
    if mismatch.kind is MismatchKind.LINE_COUNT_MISMATCH:
        lines = [
            f"   Line count mismatch: original has {mismatch.expected} lines, "
            f"translated has {mismatch.actual} lines"
        ]
        if mismatch.line_number is not None:
            lines.append(f"   First diverging line: {mismatch.line_number}")
        return lines

    if mismatch.kind is MismatchKind.TYPE_MISMATCH:
        original_kind = mismatch.original_kind.value if mismatch.original_kind else "?"
        translated_kind = mismatch.translated_kind.value if mismatch.translated_kind else "?"
        head = f"   Line {mismatch.line_number}: expected [{original_kind}] but got [{translated_kind}]"
    elif mismatch.kind is MismatchKind.UNKNOWN_SPEAKER:
        head = f"   Line {mismatch.line_number}: unknown speaker {mismatch.expected!r}"
    else:
        head = (
            f"   Line {mismatch.line_number}: speaker should be "
            f"{mismatch.expected!r} but is {mismatch.actual!r}"
        )

    return [
        head,
        f"     original:   {mismatch.original_text}",
        f"     translated: {mismatch.translated_text}",
    ]


def _format_outcome(outcome: FileOutcome) -> list[str]:
    if outcome.status is FileStatus.CODEC_ERROR:
        return ["", f"!  {outcome.identifier}", f"   {outcome.error}"]
    if outcome.status is not FileStatus.MISMATCHED or outcome.result is None:
        return []

    lines = ["", f"x  {outcome.identifier}"]
    for mismatch in outcome.result.mismatches:
        lines.extend(_format_mismatch(mismatch))
    return lines


def format_corpus_report(report: CorpusReport) -> str:
    """Render the mismatches and codec failures of one directory."""
    lines = [f"=== {report.directory}/ ==="]
    for outcome in report.outcomes:
        lines.extend(_format_outcome(outcome))
    return "\n".join(lines)


def format_validation_summary(reports: Sequence[CorpusReport]) -> str:
    """Render totals across several validated directories."""
    checked = sum(r.checked for r in reports)
    skipped = sum(r.skipped for r in reports)
    mismatched = sum(r.mismatched for r in reports)
    codec_errors = sum(r.codec_errors for r in reports)

    lines = [
        "",
        "--- SUMMARY ---",
        f"  Checked:      {checked} files",
        f"  Skipped:      {skipped} files (untranslated or missing original)",
        f"  Mismatched:   {mismatched} files",
    ]
    if codec_errors:
        lines.append(f"  Codec errors: {codec_errors} files")
    return "\n".join(lines)


def print_validation_report(reports: Sequence[CorpusReport]) -> None:
    """Print every directory report followed by the summary."""
    for report in reports:
        sys.stdout.write(format_corpus_report(report) + "\n")
    sys.stdout.write(format_validation_summary(reports) + "\n")


# ---------------------------------------------------------------------------
# Duplicates and coverage
# ---------------------------------------------------------------------------


def format_coverage_report(coverage: CoverageReport) -> str:
    """Render duplicate entries and originals without a translation."""
    registry = coverage.registry
    lines = [
        _SEPARATOR,
        f"  Total translation entries found: {registry.total}",
        f"  Unique file names in translations: {len(registry)}",
        _SEPARATOR,
        "",
        "--- DUPLICATE ENTRIES ---",
    ]

    duplicates = registry.duplicates()
    if not duplicates:
        lines.append("  No duplicates found.")
    for identifier, locations in duplicates.items():
        lines.append(f'  "{identifier}" appears {len(locations)} times:')
        lines.extend(f"    - {location}" for location in locations)
    if duplicates:
        lines.append(f"  Total duplicated entries: {len(duplicates)}")

    lines.append("")
    lines.append("--- MISSING TRANSLATIONS ---")
    lines.append(f"  Original files: {coverage.original_count}")
    lines.append(f"  Missing translations: {len(coverage.missing)}")
    lines.extend(f"    - {name}" for name in coverage.missing)
    if coverage.failed_transcripts:
        lines.append("")
        lines.append("--- UNREADABLE TRANSCRIPTS ---")
        lines.extend(f"    - {name}" for name in coverage.failed_transcripts)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Speakers and orientation
# ---------------------------------------------------------------------------


def _usage_line(usage: SpeakerUsage) -> str:
    return f"  {usage.name}  ({usage.count} files)"


def format_speaker_audit(audit: SpeakerAudit) -> str:
    """Render speaker frequencies and any registry gaps."""
    lines = [f"--- ORIGINAL SPEECH SOURCES ({len(audit.original)} unique) ---"]
    lines.extend(_usage_line(u) for u in audit.original)
    lines.append("")
    lines.append(f"--- TRANSLATED SPEECH SOURCES ({len(audit.translated)} unique) ---")
    lines.extend(_usage_line(u) for u in audit.translated)

    if audit.unmapped_originals:
        lines.append("")
        lines.append(f"--- UNMAPPED ORIGINAL SPEAKERS ({len(audit.unmapped_originals)}) ---")
        lines.extend(_usage_line(u) for u in audit.unmapped_originals)

    if audit.unknown_translated:
        lines.append("")
        lines.append(f"--- UNKNOWN TRANSLATED SPEAKERS ({len(audit.unknown_translated)}) ---")
        for unknown in audit.unknown_translated:
            line = _usage_line(unknown.usage)
            if unknown.suggestion is not None:
                line += f"  did you mean {unknown.suggestion!r}?"
            lines.append(line)

    lines.append("")
    lines.append("--- SUMMARY ---")
    lines.append(f"  Original unique sources:   {len(audit.original)}")
    lines.append(f"  Translated unique sources: {len(audit.translated)}")
    return "\n".join(lines)


def format_vertical_list(names: Sequence[str]) -> str:
    """Render the names of vertical-layout scripts."""
    if not names:
        return "No vertical-style scripts found."
    return "\n".join([f"Vertical-style scripts ({len(names)}):", *(f"  {n}" for n in names)])
