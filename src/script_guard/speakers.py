"""Speaker registry and speech-source audit.

The :class:`SpeakerRegistry` is the closed-world table mapping every
original speaker name to its canonical translated name.  It is loaded
once, never mutated, and handed to the validator explicitly.

The audit helpers collect speaker names across a whole corpus and report
registry gaps, suggesting the closest canonical name for unrecognised
translated names via ``rapidfuzz``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rapidfuzz import fuzz, process

from script_guard.exceptions import SpeakerRegistryError
from script_guard.models.script import ScriptFile

logger = logging.getLogger(__name__)

# Minimum rapidfuzz ratio (0-100) for a canonical name to be suggested.
_SUGGESTION_CUTOFF = 60.0


class SpeakerRegistry(BaseModel):
    """Immutable original -> canonical translated speaker mapping.

    Attributes:
        mapping: Original speaker name to canonical translated name.  No
            two originals may share a canonical name.
    """

    model_config = ConfigDict(frozen=True)

    mapping: dict[str, str]

    @field_validator("mapping")
    @classmethod
    def _check_bijective(cls, value: dict[str, str]) -> dict[str, str]:
        if any(not key for key in value):
            raise ValueError("speaker names must be non-empty")

        seen: dict[str, str] = {}
        clashes: list[str] = []
        for original, canonical in value.items():
            if canonical in seen:
                clashes.append(f"{seen[canonical]!r} and {original!r} -> {canonical!r}")
            else:
                seen[canonical] = original
        if clashes:
            raise ValueError("mapping is not bijective: " + "; ".join(clashes))
        return value

    def lookup(self, name: str) -> str | None:
        """Return the canonical name for *name*, or ``None`` if unknown."""
        return self.mapping.get(name)

    @property
    def canonical_names(self) -> frozenset[str]:
        return frozenset(self.mapping.values())

    def __contains__(self, name: object) -> bool:
        return name in self.mapping

    def __len__(self) -> int:
        return len(self.mapping)


def load_speaker_registry(file_path: str | Path) -> SpeakerRegistry:
    """Load a speaker registry from a JSON object file.

    Raises:
        FileNotFoundError: If *file_path* does not exist.
        SpeakerRegistryError: If the JSON is invalid or the mapping is not
            a bijective ``{str: str}`` object.
    """
    path = Path(file_path)
    raw = path.read_text(encoding="utf-8")
    try:
        registry = SpeakerRegistry(mapping=json.loads(raw))
    except json.JSONDecodeError as exc:
        raise SpeakerRegistryError(f"{path}: invalid JSON: {exc}") from exc
    except ValidationError as exc:
        raise SpeakerRegistryError(f"{path}: invalid speaker map: {exc}") from exc

    logger.info("Loaded %d speaker mapping(s) from %s", len(registry), path)
    return registry


# ---------------------------------------------------------------------------
# Corpus audit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SpeakerUsage:
    """A speaker name and the scripts it appears in."""

    name: str
    files: frozenset[str]

    @property
    def count(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class UnknownTranslatedSpeaker:
    """A translated speaker name that is not a canonical name.

    Attributes:
        usage: Where the name appears.
        suggestion: Closest canonical name, or ``None`` if nothing is
            close enough.
    """

    usage: SpeakerUsage
    suggestion: str | None = None


@dataclass
class SpeakerAudit:
    """Result of :func:`audit_speakers`.

    Attributes:
        original: Original speaker names by descending file count.
        translated: Translated speaker names by descending file count.
        unmapped_originals: Original names missing from the registry.
        unknown_translated: Translated names that are not canonical.
    """

    original: list[SpeakerUsage] = field(default_factory=list)
    translated: list[SpeakerUsage] = field(default_factory=list)
    unmapped_originals: list[SpeakerUsage] = field(default_factory=list)
    unknown_translated: list[UnknownTranslatedSpeaker] = field(default_factory=list)


def collect_speech_sources(
    scripts: Iterable[ScriptFile],
    prefix: str,
) -> dict[str, set[str]]:
    """Map each speaker name to the identifiers of the scripts using it.

    A line is a speech source if, once trimmed, it starts with *prefix*;
    the name is the remainder of the trimmed line.
    """
    sources: dict[str, set[str]] = {}
    for script in scripts:
        for line in script.lines:
            trimmed = line.strip()
            if trimmed.startswith(prefix):
                sources.setdefault(trimmed[len(prefix):], set()).add(script.identifier)
    return sources


def _by_frequency(sources: dict[str, set[str]]) -> list[SpeakerUsage]:
    usages = [SpeakerUsage(name, frozenset(files)) for name, files in sources.items()]
    return sorted(usages, key=lambda u: (-u.count, u.name))


def suggest_speaker(name: str, registry: SpeakerRegistry) -> str | None:
    """Return the canonical name closest to *name*, if any is close enough."""
    match = process.extractOne(
        name,
        sorted(registry.canonical_names),
        scorer=fuzz.ratio,
        score_cutoff=_SUGGESTION_CUTOFF,
    )
    return match[0] if match else None


def audit_speakers(
    original_sources: dict[str, set[str]],
    translated_sources: dict[str, set[str]],
    registry: SpeakerRegistry | None = None,
) -> SpeakerAudit:
    """Compare collected speaker names against each other and the registry.

    Without a registry only the frequency listings are filled in.
    """
    audit = SpeakerAudit(
        original=_by_frequency(original_sources),
        translated=_by_frequency(translated_sources),
    )
    if registry is None:
        return audit

    audit.unmapped_originals = [u for u in audit.original if u.name not in registry]

    canonical = registry.canonical_names
    for usage in audit.translated:
        if usage.name in canonical:
            continue
        suggestion = suggest_speaker(usage.name, registry)
        audit.unknown_translated.append(UnknownTranslatedSpeaker(usage, suggestion))

    logger.info(
        "Speaker audit: %d unmapped original(s), %d unknown translated name(s)",
        len(audit.unmapped_originals),
        len(audit.unknown_translated),
    )
    return audit
