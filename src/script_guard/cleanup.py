"""Whitespace, quote and bracket normalisation of translated scripts.

Translations come back from the model with stray blank lines, indentation,
single quotes and ASCII ``#`` speaker prefixes.  :func:`clean_translation`
rewrites them into the original script's conventions without touching the
words themselves.
"""

from __future__ import annotations

from script_guard.classifier import (
    ASCII_HASH,
    CORNER_BRACKETS,
    DOUBLE_QUOTES,
    FULLWIDTH_HASH,
    WHITE_CORNER_BRACKETS,
)
from script_guard.models.script import ScriptFile

_SINGLE_QUOTE = "'"


def _is_wrapped(line: str, opener: str, closer: str) -> bool:
    return len(line) >= 2 and line.startswith(opener) and line.endswith(closer)


def original_brackets(original_line: str) -> tuple[str, str] | None:
    """Return the bracket pair enclosing *original_line*, if it is speech content."""
    trimmed = original_line.strip()
    for pair in (CORNER_BRACKETS, WHITE_CORNER_BRACKETS):
        if _is_wrapped(trimmed, *pair):
            return pair
    return None


def normalise_line(line: str) -> str:
    """Convert ``'...'`` to ``"..."``, else an ASCII ``#`` prefix to ``＃``.

    Only the outermost quotes change; apostrophes inside are kept.
    """
    if _is_wrapped(line, _SINGLE_QUOTE, _SINGLE_QUOTE):
        return f'"{line[1:-1]}"'
    if line.startswith(ASCII_HASH) and len(line) > 1:
        return FULLWIDTH_HASH + line[1:]
    return line


def clean_translation(text: str, original: ScriptFile | None = None) -> str:
    """Normalise a translated script against its original.

    Steps:

    1. Trim every line and drop empty lines.
    2. :func:`normalise_line` on every line.
    3. With an original, rewrite each ``"..."`` line to the bracket pair
       used on the same line of the original.  Lines are paired by index
       up to the shorter length, even when counts differ.
    4. End with a newline when the original's bytes do.

    Args:
        text: Translated script text.
        original: The matching original script, or ``None``.

    Returns:
        The cleaned text.
    """
    cleaned = [normalise_line(line) for line in (raw.strip() for raw in text.split("\n")) if line]

    if original is not None:
        for index, (line, original_line) in enumerate(zip(cleaned, original.lines)):
            if not _is_wrapped(line, *DOUBLE_QUOTES):
                continue
            brackets = original_brackets(original_line)
            if brackets is not None:
                cleaned[index] = f"{brackets[0]}{line[1:-1]}{brackets[1]}"

    result = "\n".join(cleaned)
    if original is not None and original.trailing_newline:
        result += "\n"
    return result
