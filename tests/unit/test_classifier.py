"""Unit tests for the line classifier."""

from __future__ import annotations

import pytest

from script_guard.classifier import (
    ORIGINAL_MARKERS,
    TRANSLATED_ASCII_MARKERS,
    TRANSLATED_MARKERS,
    ClassifiedLine,
    LineKind,
    classify,
    has_markers,
)


class TestOriginalDialect:
    """Classification under the original-language markers."""

    def test_speech_source(self) -> None:
        """A fullwidth hash line is a speech source carrying the name."""
        result = classify("＃主人公", ORIGINAL_MARKERS)

        assert result == ClassifiedLine(LineKind.SPEECH_SOURCE, "主人公")

    def test_corner_bracket_content(self) -> None:
        result = classify("「こんにちは」", ORIGINAL_MARKERS)

        assert result == ClassifiedLine(LineKind.SPEECH_CONTENT, "こんにちは")

    def test_white_corner_bracket_content(self) -> None:
        result = classify("『心の声』", ORIGINAL_MARKERS)

        assert result == ClassifiedLine(LineKind.SPEECH_CONTENT, "心の声")

    @pytest.mark.parametrize("line", ["「こんにちは』", "『こんにちは」"])
    def test_brackets_do_not_cross_match(self, line: str) -> None:
        """An opener must be closed by its own closer."""
        assert classify(line, ORIGINAL_MARKERS).kind is LineKind.NORMAL

    def test_unclosed_bracket_is_normal(self) -> None:
        assert classify("「こんにちは", ORIGINAL_MARKERS).kind is LineKind.NORMAL

    def test_narration_is_normal(self) -> None:
        result = classify("地の文。", ORIGINAL_MARKERS)

        assert result == ClassifiedLine(LineKind.NORMAL, "地の文。")

    def test_ascii_hash_is_not_original_source(self) -> None:
        assert classify("#主人公", ORIGINAL_MARKERS).kind is LineKind.NORMAL

    def test_empty_brackets_are_content(self) -> None:
        """An opener directly followed by its closer is empty content."""
        assert classify("「」", ORIGINAL_MARKERS) == ClassifiedLine(LineKind.SPEECH_CONTENT, "")


class TestTranslatedDialect:
    """Classification under the translated markers."""

    def test_fullwidth_source(self) -> None:
        result = classify("＃Protagonist", TRANSLATED_MARKERS)

        assert result == ClassifiedLine(LineKind.SPEECH_SOURCE, "Protagonist")

    def test_quoted_content(self) -> None:
        result = classify('"Hello there."', TRANSLATED_MARKERS)

        assert result == ClassifiedLine(LineKind.SPEECH_CONTENT, "Hello there.")

    def test_corner_bracket_is_normal(self) -> None:
        """Original brackets are not content in the translated dialect."""
        assert classify("『Hello』", TRANSLATED_MARKERS).kind is LineKind.NORMAL

    def test_ascii_hash_not_a_source_by_default(self) -> None:
        assert classify("#Hero", TRANSLATED_MARKERS).kind is LineKind.NORMAL

    def test_ascii_convention(self) -> None:
        """The legacy convention recognises a plain ASCII hash."""
        result = classify("#Hero", TRANSLATED_ASCII_MARKERS)

        assert result == ClassifiedLine(LineKind.SPEECH_SOURCE, "Hero")

    def test_ascii_convention_rejects_fullwidth(self) -> None:
        assert classify("＃Hero", TRANSLATED_ASCII_MARKERS).kind is LineKind.NORMAL

    def test_internal_quotes_kept_in_payload(self) -> None:
        result = classify('"He said "no"."', TRANSLATED_MARKERS)

        assert result.payload == 'He said "no".'


class TestDegenerateInput:
    """Short lines never raise and never form a delimiter pair."""

    @pytest.mark.parametrize("line", ["", '"', "「", "」"])
    def test_short_lines_are_normal(self, line: str) -> None:
        markers = TRANSLATED_MARKERS if line == '"' else ORIGINAL_MARKERS

        assert classify(line, markers).kind is LineKind.NORMAL

    def test_two_quotes_are_empty_content(self) -> None:
        assert classify('""', TRANSLATED_MARKERS) == ClassifiedLine(LineKind.SPEECH_CONTENT, "")

    def test_bare_marker_is_source_with_empty_name(self) -> None:
        assert classify("＃", ORIGINAL_MARKERS) == ClassifiedLine(LineKind.SPEECH_SOURCE, "")


class TestTrim:
    """Whitespace handling."""

    def test_indented_line_without_trim_is_normal(self) -> None:
        assert classify("　「こんにちは」", ORIGINAL_MARKERS).kind is LineKind.NORMAL

    def test_indented_line_with_trim(self) -> None:
        """Fullwidth-space indentation is stripped when trimming."""
        result = classify("　「こんにちは」", ORIGINAL_MARKERS, trim=True)

        assert result == ClassifiedLine(LineKind.SPEECH_CONTENT, "こんにちは")

    def test_trailing_whitespace_with_trim(self) -> None:
        assert classify('"Hi"  \r', TRANSLATED_MARKERS, trim=True).kind is LineKind.SPEECH_CONTENT

    def test_normal_payload_is_trimmed_line(self) -> None:
        assert classify("  text  ", ORIGINAL_MARKERS, trim=True).payload == "text"


class TestPurity:
    """classify is a pure function."""

    def test_repeated_calls_agree(self) -> None:
        lines = ["＃主人公", "「こんにちは」", "地の文", "", "　『x』"]
        for line in lines:
            for trim in (False, True):
                assert classify(line, ORIGINAL_MARKERS, trim) == classify(line, ORIGINAL_MARKERS, trim)


class TestHasMarkers:
    """Marker presence over a whole file."""

    def test_detects_any_marker(self) -> None:
        assert has_markers(["narration", "　「x」"], ORIGINAL_MARKERS) is True

    def test_no_markers(self) -> None:
        assert has_markers(["narration", "more"], TRANSLATED_MARKERS) is False
