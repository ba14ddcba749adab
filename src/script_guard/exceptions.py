"""Custom exceptions for script-guard.

Exception hierarchy::

    ScriptGuardError              (base for all script-guard errors)
    +-- ScriptEncodingError       (bytes/text not representable in an encoding)
    |   +-- EncodingDetectionError (buffer matches no supported encoding)
    +-- SpeakerRegistryError      (malformed or non-bijective speaker map)
    +-- TranscriptFormatError     (exported conversation JSON is malformed)
"""

from __future__ import annotations


class ScriptGuardError(Exception):
    """Base exception for script-guard."""


class ScriptEncodingError(ScriptGuardError):
    """Raised when a buffer cannot be decoded (or text encoded) exactly.

    Silent replacement characters would corrupt structural comparisons,
    so codec failures always surface to the caller.

    Attributes:
        encoding: Codec name that failed.
        position: Byte (or character) offset of the first bad sequence,
            or ``None`` if unknown.
        source: Label of the input, typically a file name.
    """

    def __init__(
        self,
        message: str,
        encoding: str,
        position: int | None = None,
        source: str = "<bytes>",
    ) -> None:
        super().__init__(message)
        self.encoding = encoding
        self.position = position
        self.source = source


class EncodingDetectionError(ScriptEncodingError):
    """Raised when a buffer is neither valid UTF-8 nor valid legacy DBCS."""


class SpeakerRegistryError(ScriptGuardError):
    """Raised when a speaker map cannot be loaded or is not bijective."""


class TranscriptFormatError(ScriptGuardError):
    """Raised when an exported conversation does not match the message schema.

    Attributes:
        source: Label of the offending input, typically a file name.
    """

    def __init__(self, message: str, source: str = "<string>") -> None:
        super().__init__(message)
        self.source = source
