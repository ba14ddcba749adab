"""Entry tokenizer for flattened translation transcripts.

A transcript is the text of one exported conversation.  Each assistant
reply may contain several translated scripts, each introduced by a
three-line header::

    --------------------        (20 dashes)
    01_1600.txt                 (identifier, used verbatim)
    ********************        (20 asterisks)

Replies are separated by a line of 80 dashes.  The tokenizer is a small
two-state machine (scanning / in-entry) over a line cursor with a
three-line lookahead.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from pathlib import Path

from script_guard.codec import decode_detected
from script_guard.models.transcript import EntryLocation, TranscriptEntry

logger = logging.getLogger(__name__)

HEADER_OPEN = "-" * 20
HEADER_CLOSE = "*" * 20
SEPARATOR = "-" * 80


class _State(Enum):
    SCANNING = auto()
    IN_ENTRY = auto()


class _LineCursor:
    """Forward-only cursor over transcript lines.

    :meth:`peek` returns lines right-trimmed, so trailing whitespace and
    carriage returns never affect marker matching.
    """

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self.index = 0

    @property
    def at_end(self) -> bool:
        return self.index >= len(self._lines)

    def peek(self, offset: int = 0) -> str | None:
        position = self.index + offset
        if position >= len(self._lines):
            return None
        return self._lines[position].rstrip()

    def advance(self, count: int = 1) -> None:
        self.index += count

    def at_header(self) -> bool:
        """Whether the next three lines form an entry header."""
        return self.peek() == HEADER_OPEN and self.peek(2) == HEADER_CLOSE


def parse_entries(text: str, source: str = "<string>") -> list[TranscriptEntry]:
    """Recover every headered entry from *text*, in document order.

    Lines outside an entry that are neither a separator nor a valid header
    (preamble, a lone 20-dash line without its asterisk line) are skipped.
    An entry's content ends at the next 20-dash line, the next separator,
    or the end of input; the terminator is not consumed as content.
    Duplicated identifiers are all returned.

    Args:
        text: Decoded transcript text.
        source: Label recorded in each entry's location.

    Returns:
        The entries, first occurrence first.
    """
    cursor = _LineCursor(text.split("\n"))
    entries: list[TranscriptEntry] = []

    state = _State.SCANNING
    identifier = ""
    location = EntryLocation(source, 0)
    content: list[str] = []

    def _emit() -> None:
        entries.append(TranscriptEntry(identifier, tuple(content), location))
        logger.debug("Entry %r at %s: %d line(s)", identifier, location, len(content))

    while not cursor.at_end:
        line = cursor.peek()

        if state is _State.SCANNING:
            if line == SEPARATOR:
                cursor.advance()
            elif cursor.at_header():
                identifier = cursor.peek(1) or ""
                location = EntryLocation(source, cursor.index + 2)
                content = []
                cursor.advance(3)
                state = _State.IN_ENTRY
            else:
                cursor.advance()
            continue

        # In an entry: stop without consuming the terminator.
        if line in (HEADER_OPEN, SEPARATOR):
            _emit()
            state = _State.SCANNING
            continue

        content.append(line or "")
        cursor.advance()

    if state is _State.IN_ENTRY:
        _emit()

    return entries


def parse_entries_file(file_path: str | Path) -> list[TranscriptEntry]:
    """Read a transcript file and tokenize it.

    The encoding is detected, so flattened UTF-8 exports and merged
    legacy-encoded scene files are both accepted.

    Raises:
        FileNotFoundError: If *file_path* does not exist.
        ScriptEncodingError: If the contents cannot be decoded.
    """
    path = Path(file_path)
    text, _ = decode_detected(path.read_bytes(), source=path.name)
    return parse_entries(text, source=path.name)
