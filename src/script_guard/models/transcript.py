"""Transcript data models.

:class:`TranscriptEntry` and :class:`EntryLocation` are the stdlib
dataclasses produced by the entry tokenizer.  :class:`ConversationMessage`
and :class:`ContentBlock` are Pydantic models describing the exported
conversation JSON that transcripts are flattened from.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class EntryLocation:
    """Where an entry header was found, for diagnostics only.

    Attributes:
        source: Transcript file name, or ``"<string>"``.
        line_number: 1-based line number of the identifier line.
    """

    source: str
    line_number: int

    def __str__(self) -> str:
        return f"{self.source} line {self.line_number}"


@dataclass(frozen=True)
class TranscriptEntry:
    """One headered script recovered from a transcript.

    Attributes:
        identifier: Script file name taken verbatim from the header.
        content_lines: Right-trimmed lines between the header and the next
            header, separator, or end of input.
        location: Where the header was found.
    """

    identifier: str
    content_lines: tuple[str, ...]
    location: EntryLocation

    @property
    def text(self) -> str:
        """Content lines joined with newlines, as written on export."""
        return "\n".join(self.content_lines)


class ContentBlock(BaseModel):
    """A single content block of an exported message.

    Attributes:
        type: Block type, ``"text"`` or ``"thinking"``.
        content: Block text.
    """

    model_config = ConfigDict(extra="ignore")

    type: str
    content: str = ""


class ConversationMessage(BaseModel):
    """A single message of an exported conversation.

    Attributes:
        role: ``"user"`` or ``"assistant"``.
        contents: Ordered content blocks.
    """

    model_config = ConfigDict(extra="ignore")

    role: str
    contents: list[ContentBlock] = Field(default_factory=list)

    def reply_text(self) -> str:
        """Join the ``text`` blocks with newlines, ignoring thinking blocks."""
        return "\n".join(block.content for block in self.contents if block.type == "text")
