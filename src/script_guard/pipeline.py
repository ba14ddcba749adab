"""Corpus-level orchestration of the script-guard stages.

Wires the pure engine (tokenizer, classifier, validator, cleanup) to the
file system:

- :func:`export_entries` -- split transcripts into per-script files,
  routed by the original's orientation.
- :func:`check_transcripts` -- duplicate and coverage bookkeeping.
- :func:`clean_directory` -- normalise translated scripts in place.
- :func:`validate_corpus` -- validate every translated script.
- :func:`find_vertical_scripts` / :func:`load_scripts` -- corpus scans.

One file's failure never aborts a batch: missing counterparts and codec
errors are recorded as per-file outcomes and logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from script_guard.classifier import TRANSLATED_MARKERS, Dialect, DialectMarkers
from script_guard.cleanup import clean_translation
from script_guard.codec import TextEncoding, decode_detected
from script_guard.dedup import EntryRegistry, RegistrationOutcome
from script_guard.exceptions import ScriptEncodingError
from script_guard.models.report import ValidationResult
from script_guard.models.script import ScriptFile, read_script
from script_guard.models.transcript import TranscriptEntry
from script_guard.orientation import is_vertical
from script_guard.speakers import SpeakerRegistry
from script_guard.tokenizer import parse_entries_file
from script_guard.validator import validate

logger = logging.getLogger(__name__)


def _script_names(directory: Path) -> list[str]:
    return sorted(path.name for path in directory.glob("*.txt"))


# ---------------------------------------------------------------------------
# Corpus scans
# ---------------------------------------------------------------------------


def find_vertical_scripts(original_dir: str | Path) -> list[str]:
    """Return the sorted names of vertical-layout scripts in *original_dir*."""
    directory = Path(original_dir)
    return [name for name in _script_names(directory) if is_vertical((directory / name).read_bytes())]


def load_scripts(
    directory: str | Path,
    origin: Dialect,
    encoding: TextEncoding | None = None,
) -> list[ScriptFile]:
    """Decode every ``*.txt`` script in *directory*, in name order.

    Scripts that fail to decode are logged and left out.  A missing
    directory yields an empty list.
    """
    base = Path(directory)
    if not base.is_dir():
        logger.warning("Directory %s not found, skipping", base)
        return []

    scripts: list[ScriptFile] = []
    for name in _script_names(base):
        try:
            scripts.append(read_script(base / name, origin, encoding))
        except ScriptEncodingError as exc:
            logger.warning("Skipping %s: %s", name, exc)
    return scripts


# ---------------------------------------------------------------------------
# Transcript export and coverage
# ---------------------------------------------------------------------------


def _read_transcripts(transcript_dir: Path, failed: list[str]) -> list[TranscriptEntry]:
    """Tokenize every transcript in name order.

    Transcripts that cannot be decoded are logged, appended to *failed*
    and skipped.
    """
    entries: list[TranscriptEntry] = []
    for name in _script_names(transcript_dir):
        try:
            entries.extend(parse_entries_file(transcript_dir / name))
        except ScriptEncodingError as exc:
            logger.warning("Skipping transcript %s: %s", name, exc)
            failed.append(name)
    return entries


def _is_plain_file_name(identifier: str) -> bool:
    return bool(identifier) and Path(identifier).name == identifier and identifier not in (".", "..")


@dataclass
class ExportResult:
    """Counts from :func:`export_entries`.

    Attributes:
        exported: Entries written to the horizontal directory.
        exported_vertical: Entries written to the vertical directory.
        duplicates_skipped: Later occurrences of an already exported
            identifier.
        registry: Every registration, for duplicate reporting.
        failed_transcripts: Transcripts that could not be decoded.
        rejected_identifiers: Header identifiers that are not plain file
            names (e.g. ``../x.txt``).
    """

    exported: int = 0
    exported_vertical: int = 0
    duplicates_skipped: int = 0
    registry: EntryRegistry = field(default_factory=EntryRegistry)
    failed_transcripts: list[str] = field(default_factory=list)
    rejected_identifiers: list[str] = field(default_factory=list)


def export_entries(
    transcript_dir: str | Path,
    original_dir: str | Path,
    out_dir: str | Path,
    out_vertical_dir: str | Path,
) -> ExportResult:
    """Write every transcript entry to its own script file.

    Transcripts are processed in name order and the first occurrence of
    an identifier wins.  Entries whose original is vertical go to
    *out_vertical_dir*, all others to *out_dir*.  Content is written as
    UTF-8 with lines joined by ``"\\n"``.  Undecodable transcripts and
    identifiers that would escape the output directories are skipped.
    """
    normal_dir = Path(out_dir)
    vertical_dir = Path(out_vertical_dir)
    normal_dir.mkdir(parents=True, exist_ok=True)
    vertical_dir.mkdir(parents=True, exist_ok=True)

    vertical = set(find_vertical_scripts(original_dir))
    result = ExportResult()

    for entry in _read_transcripts(Path(transcript_dir), result.failed_transcripts):
        if not _is_plain_file_name(entry.identifier):
            logger.warning("Rejecting identifier %r at %s", entry.identifier, entry.location)
            result.rejected_identifiers.append(entry.identifier)
            continue

        outcome = result.registry.register(entry.identifier, entry.location)
        if outcome is RegistrationOutcome.DUPLICATE:
            result.duplicates_skipped += 1
            logger.warning(
                "Duplicate %r: keeping %s, skipping %s",
                entry.identifier,
                result.registry.first_seen(entry.identifier),
                entry.location,
            )
            continue

        if entry.identifier in vertical:
            target = vertical_dir
            result.exported_vertical += 1
        else:
            target = normal_dir
            result.exported += 1
        (target / entry.identifier).write_text(entry.text, encoding="utf-8")
        logger.debug("Exported %s to %s", entry.identifier, target)

    logger.info(
        "Export complete: %d horizontal, %d vertical, %d duplicate(s) skipped",
        result.exported,
        result.exported_vertical,
        result.duplicates_skipped,
    )
    return result


@dataclass
class CoverageReport:
    """Duplicate and coverage findings over a transcript directory.

    Attributes:
        registry: Every entry registration across all transcripts.
        original_count: Number of original scripts.
        missing: Original scripts with no transcript entry, sorted.
        failed_transcripts: Transcripts that could not be decoded.
    """

    registry: EntryRegistry
    original_count: int = 0
    missing: list[str] = field(default_factory=list)
    failed_transcripts: list[str] = field(default_factory=list)


def check_transcripts(transcript_dir: str | Path, original_dir: str | Path) -> CoverageReport:
    """Register every transcript entry and find untranslated originals."""
    registry = EntryRegistry()
    failed: list[str] = []
    for entry in _read_transcripts(Path(transcript_dir), failed):
        registry.register(entry.identifier, entry.location)

    originals = _script_names(Path(original_dir))
    return CoverageReport(
        registry=registry,
        original_count=len(originals),
        missing=registry.missing(originals),
        failed_transcripts=failed,
    )


# ---------------------------------------------------------------------------
# Cleanup
# ---------------------------------------------------------------------------


def clean_directory(directory: str | Path, original_dir: str | Path) -> tuple[int, int]:
    """Clean every translated script in *directory* in place.

    Files are only rewritten (as UTF-8) when cleaning changes them.

    Returns:
        ``(scanned, modified)`` counts.
    """
    base = Path(directory)
    if not base.is_dir():
        logger.warning("Directory %s not found, skipping", base)
        return 0, 0

    scanned = 0
    modified = 0
    for name in _script_names(base):
        path = base / name
        scanned += 1
        try:
            text, _ = decode_detected(path.read_bytes(), source=name)
            original_path = Path(original_dir) / name
            original = (
                read_script(original_path, Dialect.ORIGINAL, TextEncoding.LEGACY)
                if original_path.is_file()
                else None
            )
        except ScriptEncodingError as exc:
            logger.warning("Skipping %s: %s", name, exc)
            continue

        cleaned = clean_translation(text, original)
        if cleaned != text:
            path.write_text(cleaned, encoding="utf-8")
            modified += 1
            logger.debug("Cleaned %s", name)

    logger.info("%s: %d scanned, %d modified", base, scanned, modified)
    return scanned, modified


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class FileStatus(str, Enum):
    """Outcome of validating one translated script."""

    PASSED = "passed"
    MISMATCHED = "mismatched"
    UNTRANSLATED = "untranslated"
    MISSING_ORIGINAL = "missing_original"
    CODEC_ERROR = "codec_error"


@dataclass(frozen=True)
class FileOutcome:
    """Validation outcome of one translated script.

    Attributes:
        identifier: Script file name.
        status: The outcome.
        result: Validator output, when validation ran.
        error: Error description for a codec failure.
    """

    identifier: str
    status: FileStatus
    result: ValidationResult | None = None
    error: str | None = None


@dataclass
class CorpusReport:
    """Outcomes for one translated directory, ordered by identifier.

    Attributes:
        directory: The translated directory.
        trim: Whether lines were trimmed before classification.
        outcomes: One outcome per translated script.
    """

    directory: Path
    trim: bool = False
    outcomes: list[FileOutcome] = field(default_factory=list)

    def count(self, *statuses: FileStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status in statuses)

    @property
    def checked(self) -> int:
        return self.count(FileStatus.PASSED, FileStatus.MISMATCHED)

    @property
    def skipped(self) -> int:
        return self.count(FileStatus.UNTRANSLATED, FileStatus.MISSING_ORIGINAL)

    @property
    def mismatched(self) -> int:
        return self.count(FileStatus.MISMATCHED)

    @property
    def codec_errors(self) -> int:
        return self.count(FileStatus.CODEC_ERROR)


def validate_file(
    original_path: Path,
    translated_path: Path,
    trim: bool = False,
    registry: SpeakerRegistry | None = None,
    translated_markers: DialectMarkers = TRANSLATED_MARKERS,
    diagnose: bool = False,
) -> FileOutcome:
    """Validate one translated script against its original on disk."""
    name = translated_path.name
    if not original_path.is_file():
        logger.warning("No original found for %s, skipping", name)
        return FileOutcome(name, FileStatus.MISSING_ORIGINAL)

    try:
        original = read_script(original_path, Dialect.ORIGINAL, TextEncoding.LEGACY)
        translated = read_script(translated_path, Dialect.TRANSLATED)
    except ScriptEncodingError as exc:
        logger.warning("Codec failure for %s: %s", name, exc)
        return FileOutcome(name, FileStatus.CODEC_ERROR, error=str(exc))

    result = validate(
        original.lines,
        translated.lines,
        trim=trim,
        registry=registry,
        translated_markers=translated_markers,
        diagnose=diagnose,
    )
    if result.skipped_as_untranslated:
        logger.debug("%s is not translated yet, skipping", name)
        status = FileStatus.UNTRANSLATED
    elif result.mismatches:
        status = FileStatus.MISMATCHED
    else:
        status = FileStatus.PASSED
    return FileOutcome(name, status, result=result)


def validate_corpus(
    original_dir: str | Path,
    translated_dir: str | Path,
    trim: bool = False,
    registry: SpeakerRegistry | None = None,
    translated_markers: DialectMarkers = TRANSLATED_MARKERS,
    diagnose: bool = False,
) -> CorpusReport:
    """Validate every translated script in *translated_dir*.

    Args:
        original_dir: Directory of legacy-encoded originals.
        translated_dir: Directory of translations (encoding detected).
        trim: Strip lines before classifying (vertical scripts).
        registry: Speaker registry; ``None`` disables name checks.
        translated_markers: Translated dialect convention.
        diagnose: Locate the first divergence on line-count mismatches.

    Returns:
        A :class:`CorpusReport`; a missing *translated_dir* yields no
        outcomes.
    """
    report = CorpusReport(directory=Path(translated_dir), trim=trim)
    if not report.directory.is_dir():
        logger.warning("Directory %s not found, skipping", report.directory)
        return report

    for name in _script_names(report.directory):
        report.outcomes.append(
            validate_file(
                Path(original_dir) / name,
                report.directory / name,
                trim=trim,
                registry=registry,
                translated_markers=translated_markers,
                diagnose=diagnose,
            )
        )

    logger.info(
        "%s: %d checked, %d skipped, %d mismatched",
        report.directory,
        report.checked,
        report.skipped,
        report.mismatched,
    )
    return report
