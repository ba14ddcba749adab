"""Script file model.

A :class:`ScriptFile` is the decoded, immutable form of one scene script.
It records enough about the raw bytes (encoding, orientation, trailing
newline) that later stages never need to re-read the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from script_guard.classifier import Dialect
from script_guard.codec import TextEncoding, decode, detect_encoding, split_lines
from script_guard.orientation import is_vertical


class Orientation(str, Enum):
    """Text layout of a script."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class ScriptFile:
    """A decoded scene script.

    Attributes:
        identifier: File name, unique within a corpus (e.g. ``"01_1600.txt"``).
        lines: Content lines; a final newline yields no trailing empty line.
        origin: Whether this is an original or a translated script.
        orientation: Layout detected from the raw bytes.
        encoding: Encoding the bytes were decoded with.
        trailing_newline: Whether the raw bytes end with a line-feed.
    """

    identifier: str
    lines: tuple[str, ...]
    origin: Dialect
    orientation: Orientation = Orientation.HORIZONTAL
    encoding: TextEncoding = TextEncoding.LEGACY
    trailing_newline: bool = False

    @property
    def is_vertical(self) -> bool:
        return self.orientation is Orientation.VERTICAL

    @classmethod
    def from_bytes(
        cls,
        identifier: str,
        data: bytes,
        origin: Dialect,
        encoding: TextEncoding | None = None,
    ) -> ScriptFile:
        """Decode *data* into a :class:`ScriptFile`.

        Args:
            identifier: File name of the script.
            data: Raw file contents.
            origin: Dialect of the script.
            encoding: Declared encoding, or ``None`` to detect it.

        Raises:
            ScriptEncodingError: If *data* cannot be decoded exactly.
        """
        if encoding is None:
            encoding = detect_encoding(data, source=identifier)
        text = decode(data, encoding, source=identifier)
        orientation = Orientation.VERTICAL if is_vertical(data) else Orientation.HORIZONTAL
        return cls(
            identifier=identifier,
            lines=tuple(split_lines(text)),
            origin=origin,
            orientation=orientation,
            encoding=encoding,
            trailing_newline=data.endswith(b"\n"),
        )


def read_script(
    file_path: str | Path,
    origin: Dialect,
    encoding: TextEncoding | None = None,
) -> ScriptFile:
    """Read and decode the script at *file_path*.

    Raises:
        FileNotFoundError: If *file_path* does not exist.
        ScriptEncodingError: If the contents cannot be decoded exactly.
    """
    path = Path(file_path)
    return ScriptFile.from_bytes(path.name, path.read_bytes(), origin, encoding)
