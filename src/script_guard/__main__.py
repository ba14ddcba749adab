"""Entry point for ``python -m script_guard``.

Provides a CLI over the translation pipeline stages.  Uses stdlib
:mod:`argparse` for argument parsing.

Subcommands:
    flatten    -- Flatten exported conversation JSON into transcripts.
    export     -- Split transcripts into per-script translation files.
    duplicates -- Report duplicated and missing transcript entries.
    vertical   -- List vertical-layout original scripts.
    clean      -- Normalise translated scripts in place.
    validate   -- Check translated scripts against their originals.
    speakers   -- Audit speech-source names across the corpus.
    merge      -- Merge related original scenes into batch files.

Exit codes:
    0 -- Completed (and, for ``validate``, no mismatches).
    1 -- Mismatches found, or an error occurred (config, missing input).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from script_guard.classifier import ORIGINAL_MARKERS, TRANSLATED_CONVENTIONS, Dialect
from script_guard.codec import TextEncoding
from script_guard.config import ConfigError, Settings, load_settings
from script_guard.exceptions import ScriptGuardError
from script_guard.export import flatten_directory
from script_guard.log import setup_logging
from script_guard.merge import MergeMode, merge_directory
from script_guard.pipeline import (
    check_transcripts,
    clean_directory,
    export_entries,
    find_vertical_scripts,
    load_scripts,
    validate_corpus,
)
from script_guard.report import (
    format_coverage_report,
    format_speaker_audit,
    format_vertical_list,
    print_validation_report,
)
from script_guard.speakers import (
    SpeakerRegistry,
    audit_speakers,
    collect_speech_sources,
    load_speaker_registry,
)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )

    parser = argparse.ArgumentParser(
        prog="script-guard",
        description="Keep translated scene scripts structurally aligned with their originals.",
    )
    subparsers = parser.add_subparsers(dest="command")

    flatten = subparsers.add_parser(
        "flatten", parents=[common], help="Flatten exported conversation JSON into transcripts."
    )
    flatten.add_argument("--input", type=Path, default=None, help="Directory of *.json exports.")
    flatten.add_argument("--output", type=Path, default=None, help="Directory for *.txt transcripts.")

    export = subparsers.add_parser(
        "export", parents=[common], help="Split transcripts into per-script translation files."
    )
    export.add_argument("--transcripts", type=Path, default=None, help="Directory of transcripts.")
    export.add_argument("--original", type=Path, default=None, help="Directory of original scripts.")
    export.add_argument("--output", type=Path, default=None, help="Directory for horizontal scripts.")
    export.add_argument(
        "--output-vertical", type=Path, default=None, help="Directory for vertical scripts."
    )

    duplicates = subparsers.add_parser(
        "duplicates", parents=[common], help="Report duplicated and missing transcript entries."
    )
    duplicates.add_argument("--transcripts", type=Path, default=None, help="Directory of transcripts.")
    duplicates.add_argument("--original", type=Path, default=None, help="Directory of original scripts.")

    vertical = subparsers.add_parser(
        "vertical", parents=[common], help="List vertical-layout original scripts."
    )
    vertical.add_argument("--original", type=Path, default=None, help="Directory of original scripts.")

    clean = subparsers.add_parser(
        "clean", parents=[common], help="Normalise translated scripts in place."
    )
    clean.add_argument(
        "directories",
        nargs="*",
        type=Path,
        help="Translated directories (default: the configured horizontal and vertical ones).",
    )

    validate = subparsers.add_parser(
        "validate", parents=[common], help="Check translated scripts against their originals."
    )
    validate.add_argument(
        "--diagnose",
        action="store_true",
        default=False,
        help="Locate the first diverging line when line counts differ.",
    )
    _add_speaker_options(validate)

    speakers = subparsers.add_parser(
        "speakers", parents=[common], help="Audit speech-source names across the corpus."
    )
    _add_speaker_options(speakers)

    merge = subparsers.add_parser(
        "merge", parents=[common], help="Merge related original scenes into batch files."
    )
    merge.add_argument("mode", choices=[m.value for m in MergeMode], help="Grouping rule.")
    merge.add_argument("--original", type=Path, default=None, help="Directory of original scripts.")
    merge.add_argument(
        "--output", type=Path, default=None, help="Output directory (default: merged-<mode>-scenes/)."
    )

    return parser


def _add_speaker_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--speaker-map",
        type=Path,
        default=None,
        help="JSON speaker map (overrides SPEAKER_MAP).",
    )
    parser.add_argument(
        "--marker",
        choices=sorted(TRANSLATED_CONVENTIONS),
        default=None,
        help="Translated speech-source convention (overrides TRANSLATED_SOURCE_MARKER).",
    )


def _registry(args: argparse.Namespace, settings: Settings) -> SpeakerRegistry | None:
    path = args.speaker_map or settings.speaker_map
    return load_speaker_registry(path) if path is not None else None


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_flatten(args: argparse.Namespace, settings: Settings) -> int:
    source = args.input or settings.transcript_json_dir
    result = flatten_directory(source, args.output or settings.transcript_text_dir)
    if not result.written and not result.failed:
        print(f"No JSON files found in {source}/")
        return 0
    for name, count in result.written.items():
        print(f"{name} -- {count} assistant replies written")
    for name in result.failed:
        print(f"{name} -- skipped (not a conversation export)")
    print(f"\nDone. {len(result.written)} files processed.")
    return 1 if result.failed else 0


def _handle_export(args: argparse.Namespace, settings: Settings) -> int:
    result = export_entries(
        args.transcripts or settings.transcript_text_dir,
        args.original or settings.original_dir,
        args.output or settings.translated_dir,
        args.output_vertical or settings.translated_vertical_dir,
    )
    print("--- SUMMARY ---")
    print(f"  Exported: {result.exported} files (horizontal)")
    print(f"  Exported: {result.exported_vertical} files (vertical)")
    if result.duplicates_skipped:
        print(f"  Duplicates skipped: {result.duplicates_skipped}")
    if result.rejected_identifiers:
        print(f"  Unsafe names rejected: {len(result.rejected_identifiers)}")
    if result.failed_transcripts:
        print(f"  Unreadable transcripts: {', '.join(result.failed_transcripts)}")
        return 1
    return 0


def _handle_duplicates(args: argparse.Namespace, settings: Settings) -> int:
    coverage = check_transcripts(
        args.transcripts or settings.transcript_text_dir,
        args.original or settings.original_dir,
    )
    print(format_coverage_report(coverage))
    return 0


def _handle_vertical(args: argparse.Namespace, settings: Settings) -> int:
    print(format_vertical_list(find_vertical_scripts(args.original or settings.original_dir)))
    return 0


def _handle_clean(args: argparse.Namespace, settings: Settings) -> int:
    directories = args.directories or [settings.translated_dir, settings.translated_vertical_dir]
    scanned = 0
    modified = 0
    for directory in directories:
        dir_scanned, dir_modified = clean_directory(directory, settings.original_dir)
        scanned += dir_scanned
        modified += dir_modified
    print("--- SUMMARY ---")
    print(f"  Total files scanned: {scanned}")
    print(f"  Files modified:      {modified}")
    return 0


def _handle_validate(args: argparse.Namespace, settings: Settings) -> int:
    markers = TRANSLATED_CONVENTIONS[args.marker] if args.marker else settings.translated_markers
    registry = _registry(args, settings)

    reports = [
        validate_corpus(
            settings.original_dir,
            directory,
            trim=trim,
            registry=registry,
            translated_markers=markers,
            diagnose=args.diagnose,
        )
        for directory, trim in (
            (settings.translated_dir, False),
            (settings.translated_vertical_dir, True),
        )
    ]
    print_validation_report(reports)
    return 1 if any(r.mismatched for r in reports) else 0


def _handle_speakers(args: argparse.Namespace, settings: Settings) -> int:
    markers = TRANSLATED_CONVENTIONS[args.marker] if args.marker else settings.translated_markers
    originals = load_scripts(settings.original_dir, Dialect.ORIGINAL, TextEncoding.LEGACY)
    translations = [
        *load_scripts(settings.translated_dir, Dialect.TRANSLATED),
        *load_scripts(settings.translated_vertical_dir, Dialect.TRANSLATED),
    ]
    audit = audit_speakers(
        collect_speech_sources(originals, ORIGINAL_MARKERS.source_prefixes[0]),
        collect_speech_sources(translations, markers.source_prefixes[0]),
        _registry(args, settings),
    )
    print(format_speaker_audit(audit))
    return 0


def _handle_merge(args: argparse.Namespace, settings: Settings) -> int:
    mode = MergeMode(args.mode)
    output = args.output or Path(f"merged-{mode.value}-scenes")
    written = merge_directory(args.original or settings.original_dir, output, mode)
    for name, count in written.items():
        print(f"{name} -- {count} files merged")
    print(f"\nDone. {len(written)} merged files written to {output}/")
    return 0


_HANDLERS = {
    "flatten": _handle_flatten,
    "export": _handle_export,
    "duplicates": _handle_duplicates,
    "vertical": _handle_vertical,
    "clean": _handle_clean,
    "validate": _handle_validate,
    "speakers": _handle_speakers,
    "merge": _handle_merge,
}


def main(argv: list[str] | None = None) -> int:
    """Run the script-guard CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``
            when ``None`` (the normal case).

    Returns:
        Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        return _HANDLERS[args.command](args, settings)
    except (ScriptGuardError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
