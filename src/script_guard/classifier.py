"""Line classification for original and translated scripts.

Each script line plays one of three structural roles:

- **speech source**: names the speaker of the following line
  (``＃主人公``), payload is the name;
- **speech content**: a bracketed or quoted utterance (``「…」``,
  ``『…』`` or ``"…"``), payload is the text between the delimiters;
- **normal**: anything else, payload is the line itself.

Which markers count depends on the dialect.  Markers are data
(:class:`DialectMarkers`) rather than literals in the classifier, so the
translated corpus can switch between the ASCII ``#`` convention and the
fullwidth ``＃`` convention through configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

FULLWIDTH_HASH = "＃"
ASCII_HASH = "#"
CORNER_BRACKETS = ("「", "」")
WHITE_CORNER_BRACKETS = ("『", "』")
DOUBLE_QUOTES = ('"', '"')


class Dialect(str, Enum):
    """Which side of an original/translated pair a line comes from."""

    ORIGINAL = "original"
    TRANSLATED = "translated"


class LineKind(str, Enum):
    """Structural role of a script line."""

    SPEECH_SOURCE = "speech_source"
    SPEECH_CONTENT = "speech_content"
    NORMAL = "normal"


@dataclass(frozen=True)
class ClassifiedLine:
    """Result of classifying one line.

    Attributes:
        kind: The structural role.
        payload: Speaker name for a speech source, enclosed text for
            speech content, or the (possibly trimmed) line for a normal
            line.
    """

    kind: LineKind
    payload: str


@dataclass(frozen=True)
class DialectMarkers:
    """Marker set recognised for one dialect.

    Attributes:
        dialect: The dialect these markers belong to.
        source_prefixes: Prefixes that open a speech-source line.
        content_delimiters: ``(open, close)`` pairs enclosing speech
            content.  Each pair is matched independently, so a line
            opened with one pair's opener must close with that same
            pair's closer.
    """

    dialect: Dialect
    source_prefixes: tuple[str, ...]
    content_delimiters: tuple[tuple[str, str], ...]


ORIGINAL_MARKERS = DialectMarkers(
    dialect=Dialect.ORIGINAL,
    source_prefixes=(FULLWIDTH_HASH,),
    content_delimiters=(CORNER_BRACKETS, WHITE_CORNER_BRACKETS),
)

TRANSLATED_MARKERS = DialectMarkers(
    dialect=Dialect.TRANSLATED,
    source_prefixes=(FULLWIDTH_HASH,),
    content_delimiters=(DOUBLE_QUOTES,),
)

# Earlier corpus snapshots, before cleanup rewrote "#" to "＃".
TRANSLATED_ASCII_MARKERS = DialectMarkers(
    dialect=Dialect.TRANSLATED,
    source_prefixes=(ASCII_HASH,),
    content_delimiters=(DOUBLE_QUOTES,),
)

TRANSLATED_CONVENTIONS: dict[str, DialectMarkers] = {
    "fullwidth": TRANSLATED_MARKERS,
    "ascii": TRANSLATED_ASCII_MARKERS,
}


def _match_source(line: str, markers: DialectMarkers) -> str | None:
    for prefix in markers.source_prefixes:
        if line.startswith(prefix):
            return line[len(prefix):]
    return None


def _match_content(line: str, markers: DialectMarkers) -> str | None:
    for opener, closer in markers.content_delimiters:
        # An opener and closer need at least two characters between them.
        if len(line) < len(opener) + len(closer):
            continue
        if line.startswith(opener) and line.endswith(closer):
            return line[len(opener):len(line) - len(closer)]
    return None


def classify(line: str, markers: DialectMarkers, trim: bool = False) -> ClassifiedLine:
    """Classify *line* under *markers*.

    Args:
        line: One script line.
        markers: Marker set of the line's dialect.
        trim: Strip surrounding whitespace first.  Vertical scripts indent
            every line with a fullwidth space, which must not affect the
            classification.

    Returns:
        The :class:`ClassifiedLine`.  Empty and one-character lines can
        never be speech content and fall through to normal.
    """
    target = line.strip() if trim else line

    name = _match_source(target, markers)
    if name is not None:
        return ClassifiedLine(LineKind.SPEECH_SOURCE, name)

    text = _match_content(target, markers)
    if text is not None:
        return ClassifiedLine(LineKind.SPEECH_CONTENT, text)

    return ClassifiedLine(LineKind.NORMAL, target)


def has_markers(lines: list[str], markers: DialectMarkers) -> bool:
    """Return ``True`` if any trimmed line is a speech source or content line."""
    return any(classify(line, markers, trim=True).kind is not LineKind.NORMAL for line in lines)
