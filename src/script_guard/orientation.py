"""Byte-level detection of vertical (tategumi) script layout.

Vertical scripts open every line with either a fullwidth space (narration
indent) or a left corner bracket (dialogue).  In the legacy encoding these
are ``0x81 0x40`` and ``0x81 0x75``: same lead byte, different trail byte.
The check runs on raw bytes so it never depends on decoding.
"""

from __future__ import annotations

_LF = 0x0A
_CR = 0x0D

_LEAD_BYTE = 0x81
_FULLWIDTH_SPACE_TRAIL = 0x40
_LEFT_CORNER_BRACKET_TRAIL = 0x75
_VERTICAL_TRAILS = frozenset({_FULLWIDTH_SPACE_TRAIL, _LEFT_CORNER_BRACKET_TRAIL})


def _starts_vertical(data: bytes, start: int, length: int) -> bool:
    return (
        length >= 2
        and data[start] == _LEAD_BYTE
        and data[start + 1] in _VERTICAL_TRAILS
    )


def is_vertical(data: bytes) -> bool:
    """Return ``True`` if every non-empty line starts with a vertical marker.

    Lines are split on LF; a CR directly before the LF is not part of the
    line, so LF and CRLF files behave the same.  A buffer with no
    non-empty line is never vertical.

    Args:
        data: Raw legacy-encoded file contents.

    Returns:
        Whether the buffer is laid out for vertical reading.
    """
    pos = 0
    has_content = False
    size = len(data)

    while pos < size:
        end = data.find(_LF, pos)
        if end == -1:
            end = size

        line_end = end - 1 if end > pos and data[end - 1] == _CR else end
        length = line_end - pos

        if length > 0:
            has_content = True
            if not _starts_vertical(data, pos, length):
                return False

        pos = end + 1

    return has_content
