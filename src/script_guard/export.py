"""Flattening of exported conversation JSON into transcript text.

An exported conversation is a JSON array of messages.  Only the text
blocks of assistant replies carry translations; user prompts and
thinking blocks are dropped.  Replies are joined with the 80-dash
separator understood by :mod:`script_guard.tokenizer`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from script_guard.exceptions import TranscriptFormatError
from script_guard.models.transcript import ConversationMessage
from script_guard.tokenizer import SEPARATOR

logger = logging.getLogger(__name__)

_CONVERSATION_ADAPTER = TypeAdapter(list[ConversationMessage])


def parse_conversation(raw_json: str | bytes, source: str = "<string>") -> list[ConversationMessage]:
    """Validate *raw_json* as a list of conversation messages.

    Raises:
        TranscriptFormatError: If the JSON is invalid or does not match
            the message schema.
    """
    try:
        return _CONVERSATION_ADAPTER.validate_json(raw_json)
    except ValidationError as exc:
        raise TranscriptFormatError(
            f"{source}: not a conversation export ({exc.error_count()} error(s)): {exc}",
            source=source,
        ) from exc


def flatten_conversation(raw_json: str | bytes, source: str = "<string>") -> tuple[str, int]:
    """Flatten an exported conversation into transcript text.

    Returns:
        A ``(text, reply_count)`` tuple.  Assistant replies with no text
        blocks are not counted.
    """
    messages = parse_conversation(raw_json, source=source)
    replies = [
        text
        for text in (m.reply_text() for m in messages if m.role == "assistant")
        if text
    ]
    return f"\n{SEPARATOR}\n".join(replies), len(replies)


@dataclass
class FlattenResult:
    """Outcome of :func:`flatten_directory`.

    Attributes:
        written: Written file name to assistant reply count, in sorted
            order.
        failed: Export files that were not valid conversation JSON.
    """

    written: dict[str, int] = field(default_factory=dict)
    failed: list[str] = field(default_factory=list)


def flatten_directory(input_dir: str | Path, output_dir: str | Path) -> FlattenResult:
    """Flatten every ``*.json`` export in *input_dir* into ``*.txt`` files.

    An export that fails validation is logged, recorded in
    :attr:`FlattenResult.failed` and skipped.
    """
    source_dir = Path(input_dir)
    target_dir = Path(output_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    result = FlattenResult()
    for json_path in sorted(source_dir.glob("*.json")):
        try:
            text, count = flatten_conversation(json_path.read_bytes(), source=json_path.name)
        except TranscriptFormatError as exc:
            logger.warning("Skipping export %s: %s", json_path.name, exc)
            result.failed.append(json_path.name)
            continue
        out_path = target_dir / f"{json_path.stem}.txt"
        out_path.write_text(text, encoding="utf-8")
        result.written[out_path.name] = count
        logger.info("%s: %d assistant repl(ies) written", out_path.name, count)

    return result
