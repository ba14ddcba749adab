"""Unit tests for conversation-export flattening."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from script_guard.exceptions import TranscriptFormatError
from script_guard.export import flatten_conversation, flatten_directory, parse_conversation
from script_guard.tokenizer import SEPARATOR, parse_entries

CONVERSATION = [
    {"role": "user", "contents": [{"type": "text", "content": "Translate this."}]},
    {
        "role": "assistant",
        "contents": [
            {"type": "thinking", "content": "Let me think."},
            {"type": "text", "content": "--------------------\n01_a.txt\n********************"},
            {"type": "text", "content": '"Hello"'},
        ],
    },
    {"role": "assistant", "contents": [{"type": "thinking", "content": "Only thoughts."}]},
    {
        "role": "assistant",
        "contents": [{"type": "text", "content": "--------------------\n01_b.txt\n********************\nBye"}],
    },
]


def test_parse_conversation_ignores_extra_fields() -> None:
    raw = json.dumps([{"role": "user", "contents": [], "timestamp": 1}])

    messages = parse_conversation(raw)

    assert messages[0].role == "user"
    assert messages[0].contents == []


def test_flatten_joins_replies_with_separator() -> None:
    text, count = flatten_conversation(json.dumps(CONVERSATION))

    assert count == 2
    assert text == (
        "--------------------\n01_a.txt\n********************\n"
        '"Hello"'
        f"\n{SEPARATOR}\n"
        "--------------------\n01_b.txt\n********************\nBye"
    )


def test_flattened_text_tokenizes() -> None:
    text, _ = flatten_conversation(json.dumps(CONVERSATION))

    entries = parse_entries(text)

    assert [(e.identifier, e.content_lines) for e in entries] == [
        ("01_a.txt", ('"Hello"',)),
        ("01_b.txt", ("Bye",)),
    ]


def test_empty_conversation() -> None:
    assert flatten_conversation("[]") == ("", 0)


def test_invalid_json_raises() -> None:
    with pytest.raises(TranscriptFormatError, match="broken.json"):
        flatten_conversation("{oops", source="broken.json")


def test_wrong_shape_raises() -> None:
    with pytest.raises(TranscriptFormatError) as exc_info:
        parse_conversation(json.dumps({"role": "user"}), source="obj.json")

    assert exc_info.value.source == "obj.json"


def test_flatten_directory(tmp_path: Path) -> None:
    source = tmp_path / "json"
    source.mkdir()
    (source / "b.json").write_text(json.dumps(CONVERSATION), encoding="utf-8")
    (source / "a.json").write_text("[]", encoding="utf-8")
    (source / "notes.md").write_text("ignored", encoding="utf-8")

    result = flatten_directory(source, tmp_path / "text")

    assert result.written == {"a.txt": 0, "b.txt": 2}
    assert list(result.written) == ["a.txt", "b.txt"]
    assert result.failed == []
    assert (tmp_path / "text" / "b.txt").read_text(encoding="utf-8").endswith("Bye")


def test_flatten_directory_skips_invalid_export(tmp_path: Path) -> None:
    source = tmp_path / "json"
    source.mkdir()
    (source / "1.json").write_text("{oops", encoding="utf-8")
    (source / "2.json").write_text(json.dumps(CONVERSATION), encoding="utf-8")

    result = flatten_directory(source, tmp_path / "text")

    assert result.failed == ["1.json"]
    assert result.written == {"2.txt": 2}
    assert not (tmp_path / "text" / "1.txt").exists()
