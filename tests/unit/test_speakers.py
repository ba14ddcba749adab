"""Unit tests for the speaker registry and speech-source audit."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from script_guard.classifier import Dialect
from script_guard.exceptions import SpeakerRegistryError
from script_guard.models.script import ScriptFile
from script_guard.speakers import (
    SpeakerRegistry,
    audit_speakers,
    collect_speech_sources,
    load_speaker_registry,
    suggest_speaker,
)


def _script(identifier: str, *lines: str) -> ScriptFile:
    return ScriptFile(identifier=identifier, lines=lines, origin=Dialect.ORIGINAL)


@pytest.fixture()
def registry() -> SpeakerRegistry:
    return SpeakerRegistry(mapping={"主人公": "Protagonist", "先生": "Teacher"})


class TestSpeakerRegistry:
    """Registry construction and lookup."""

    def test_lookup_known(self, registry: SpeakerRegistry) -> None:
        assert registry.lookup("主人公") == "Protagonist"

    def test_lookup_unknown(self, registry: SpeakerRegistry) -> None:
        assert registry.lookup("謎の男") is None

    def test_contains_and_len(self, registry: SpeakerRegistry) -> None:
        assert "先生" in registry
        assert "Teacher" not in registry
        assert len(registry) == 2

    def test_canonical_names(self, registry: SpeakerRegistry) -> None:
        assert registry.canonical_names == frozenset({"Protagonist", "Teacher"})

    def test_non_bijective_mapping_rejected(self) -> None:
        """Two originals may not share a canonical name."""
        with pytest.raises(ValidationError, match="not bijective"):
            SpeakerRegistry(mapping={"主人公": "Hero", "勇者": "Hero"})

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError, match="non-empty"):
            SpeakerRegistry(mapping={"": "Nobody"})

    def test_registry_is_immutable(self, registry: SpeakerRegistry) -> None:
        with pytest.raises(ValidationError):
            registry.mapping = {}  # type: ignore[misc]


class TestLoadSpeakerRegistry:
    """Loading from JSON files."""

    def test_load_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "speakers.json"
        path.write_text(json.dumps({"主人公": "Protagonist"}, ensure_ascii=False), encoding="utf-8")

        registry = load_speaker_registry(path)

        assert registry.lookup("主人公") == "Protagonist"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "speakers.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SpeakerRegistryError, match="invalid JSON"):
            load_speaker_registry(path)

    def test_non_object_json(self, tmp_path: Path) -> None:
        path = tmp_path / "speakers.json"
        path.write_text('["主人公"]', encoding="utf-8")

        with pytest.raises(SpeakerRegistryError, match="invalid speaker map"):
            load_speaker_registry(path)

    def test_non_bijective_file(self, tmp_path: Path) -> None:
        path = tmp_path / "speakers.json"
        path.write_text('{"a": "X", "b": "X"}', encoding="utf-8")

        with pytest.raises(SpeakerRegistryError):
            load_speaker_registry(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_speaker_registry(tmp_path / "missing.json")


class TestCollectSpeechSources:
    """Collecting names across scripts."""

    def test_collects_names_per_file(self) -> None:
        scripts = [
            _script("a.txt", "＃主人公", "「a」", "＃先生"),
            _script("b.txt", "　＃主人公", "地の文"),
        ]

        sources = collect_speech_sources(scripts, "＃")

        assert sources == {"主人公": {"a.txt", "b.txt"}, "先生": {"a.txt"}}

    def test_other_prefix(self) -> None:
        sources = collect_speech_sources([_script("a.txt", "#Hero", "＃主人公")], "#")

        assert sources == {"Hero": {"a.txt"}}


class TestAuditSpeakers:
    """Registry gap reporting."""

    def test_frequency_order(self) -> None:
        audit = audit_speakers({"b": {"1", "2"}, "a": {"1"}, "c": {"3", "4"}}, {})

        assert [u.name for u in audit.original] == ["b", "c", "a"]
        assert audit.original[0].count == 2

    def test_without_registry(self) -> None:
        audit = audit_speakers({"主人公": {"a.txt"}}, {"Hero": {"a.txt"}})

        assert audit.unmapped_originals == []
        assert audit.unknown_translated == []

    def test_unmapped_originals(self, registry: SpeakerRegistry) -> None:
        audit = audit_speakers({"主人公": {"a.txt"}, "謎の男": {"b.txt"}}, {}, registry)

        assert [u.name for u in audit.unmapped_originals] == ["謎の男"]

    def test_unknown_translated_with_suggestion(self, registry: SpeakerRegistry) -> None:
        audit = audit_speakers({}, {"Protagonst": {"a.txt"}, "Teacher": {"a.txt"}}, registry)

        assert len(audit.unknown_translated) == 1
        assert audit.unknown_translated[0].usage.name == "Protagonst"
        assert audit.unknown_translated[0].suggestion == "Protagonist"

    def test_suggestion_requires_similarity(self, registry: SpeakerRegistry) -> None:
        assert suggest_speaker("Zzz", registry) is None
