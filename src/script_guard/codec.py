"""Byte-exact conversion between script bytes and Unicode text.

Original scripts are stored in the legacy Japanese double-byte encoding
(Windows code page 932, the superset of Shift-JIS that the game engine
writes).  Translated scripts may be in that encoding or in UTF-8
depending on pipeline stage, so :func:`detect_encoding` picks one with
``chardet`` and confirms the pick by decoding.

All conversions are strict: a byte sequence with no mapping raises
:class:`~script_guard.exceptions.ScriptEncodingError` instead of being
replaced with U+FFFD.
"""

from __future__ import annotations

import logging
import unicodedata
from enum import Enum

import chardet

from script_guard.exceptions import EncodingDetectionError, ScriptEncodingError

logger = logging.getLogger(__name__)


class TextEncoding(str, Enum):
    """Encodings found at the corpus boundary.

    The value is the Python codec name.
    """

    LEGACY = "cp932"
    UTF8 = "utf-8"


# chardet names that resolve to one of the corpus encodings.
_CHARDET_NAMES = {
    "ascii": TextEncoding.UTF8,
    "utf-8": TextEncoding.UTF8,
    "utf-8-sig": TextEncoding.UTF8,
    "shift_jis": TextEncoding.LEGACY,
    "cp932": TextEncoding.LEGACY,
    "windows-31j": TextEncoding.LEGACY,
}
_MIN_CONFIDENCE = 0.7

# The legacy codec maps stray single bytes (0x80, 0xA0, 0xFD-0xFF) to C1
# controls and private-use code points; script text never contains them.
_STRAY_CATEGORIES = frozenset({"Cc", "Co"})
_ALLOWED_CONTROLS = frozenset("\t\n\r")


def _decodes_cleanly(data: bytes, encoding: TextEncoding) -> bool:
    try:
        text = data.decode(encoding.value)
    except UnicodeDecodeError:
        return False
    return not any(
        unicodedata.category(ch) in _STRAY_CATEGORIES and ch not in _ALLOWED_CONTROLS
        for ch in text
    )


def _chardet_guess(data: bytes) -> TextEncoding | None:
    detection = chardet.detect(data)
    name = (detection.get("encoding") or "").lower()
    confidence = detection.get("confidence") or 0.0
    if confidence <= _MIN_CONFIDENCE:
        return None
    return _CHARDET_NAMES.get(name)


def detect_encoding(data: bytes, source: str = "<bytes>") -> TextEncoding:
    """Guess whether *data* is UTF-8 or the legacy double-byte encoding.

    A confident :func:`chardet.detect` verdict naming either encoding is
    tried first.  Short scripts often give chardet too little evidence, so
    UTF-8 and then the legacy encoding are tried next.  A candidate is
    accepted only if it decodes strictly without producing stray control
    or private-use characters.  Empty and pure-ASCII buffers are reported
    as UTF-8.

    Args:
        data: Raw file contents.
        source: Label used in error messages.

    Returns:
        The detected :class:`TextEncoding`.

    Raises:
        EncodingDetectionError: If *data* matches neither encoding.
    """
    if not data:
        return TextEncoding.UTF8

    guess = _chardet_guess(data)
    candidates = [guess] if guess is not None else []
    candidates += [e for e in (TextEncoding.UTF8, TextEncoding.LEGACY) if e is not guess]

    for encoding in candidates:
        if _decodes_cleanly(data, encoding):
            logger.debug("%s: detected %s (chardet guess: %s)", source, encoding.value, guess)
            return encoding

    raise EncodingDetectionError(
        f"{source}: bytes are neither UTF-8 nor {TextEncoding.LEGACY.value}",
        encoding="unknown",
        source=source,
    )


def decode(
    data: bytes,
    encoding: TextEncoding = TextEncoding.LEGACY,
    source: str = "<bytes>",
) -> str:
    """Decode *data* strictly under *encoding*.

    Raises:
        ScriptEncodingError: If any byte sequence has no mapping.  The
            error carries the offset of the first bad byte.
    """
    try:
        return data.decode(encoding.value)
    except UnicodeDecodeError as exc:
        raise ScriptEncodingError(
            f"{source}: cannot decode byte 0x{data[exc.start]:02x} "
            f"at offset {exc.start} as {encoding.value}",
            encoding=encoding.value,
            position=exc.start,
            source=source,
        ) from exc


def encode(
    text: str,
    encoding: TextEncoding = TextEncoding.LEGACY,
    source: str = "<string>",
) -> bytes:
    """Encode *text* strictly under *encoding*.

    Raises:
        ScriptEncodingError: If a character is not representable.
    """
    try:
        return text.encode(encoding.value)
    except UnicodeEncodeError as exc:
        raise ScriptEncodingError(
            f"{source}: character {text[exc.start]!r} at index {exc.start} "
            f"is not representable in {encoding.value}",
            encoding=encoding.value,
            position=exc.start,
            source=source,
        ) from exc


def decode_detected(data: bytes, source: str = "<bytes>") -> tuple[str, TextEncoding]:
    """Detect the encoding of *data* and decode it.

    Returns:
        A ``(text, encoding)`` tuple.
    """
    encoding = detect_encoding(data, source=source)
    return decode(data, encoding, source=source), encoding


def split_lines(text: str) -> list[str]:
    """Split *text* on line-feeds, dropping one trailing empty segment.

    A final newline therefore never produces a phantom last line, which
    keeps line numbers of an original/translated pair aligned.  Carriage
    returns are left on the lines.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
