"""Merging of related scene scripts into single translation batches.

Scenes are grouped by file-name prefix and concatenated, each preceded by
its name and an asterisk line, so the model's reply can be tokenized back
into per-file entries.  Merging works on raw bytes so the legacy encoding
passes through untouched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

from script_guard.codec import TextEncoding, encode
from script_guard.tokenizer import HEADER_CLOSE, HEADER_OPEN

logger = logging.getLogger(__name__)

_MEMBER_SEPARATOR = f"\n{HEADER_OPEN}\n".encode("ascii")


class MergeMode(str, Enum):
    """How scene files are grouped."""

    EXPLORATION = "exploration"
    NORMAL = "normal"
    DAY = "day"


# Group 1 of each pattern is the group key.
_PATTERNS: dict[MergeMode, re.Pattern[str]] = {
    # F01_map.txt -> "F01"
    MergeMode.EXPLORATION: re.compile(r"^([A-Z]\d{2})_(.+)\.txt$", re.ASCII),
    # 01z_2600.txt -> "01z"
    MergeMode.NORMAL: re.compile(r"^(\d\w*)_(.+)\.txt$", re.ASCII),
    # 02a_1640h.txt -> "02"
    MergeMode.DAY: re.compile(r"^(\d{2})\w*_.+\.txt$", re.ASCII),
}


def group_scene_files(names: Iterable[str], mode: MergeMode) -> dict[str, list[str]]:
    """Group scene file names by the prefix *mode* extracts.

    Names that do not match are skipped.  Keys and members are sorted.
    """
    pattern = _PATTERNS[mode]
    groups: dict[str, list[str]] = {}
    for name in names:
        match = pattern.match(name)
        if match:
            groups.setdefault(match.group(1), []).append(name)
    return {key: sorted(groups[key]) for key in sorted(groups)}


def merge_scene_group(members: Sequence[tuple[str, bytes]]) -> bytes:
    """Concatenate ``(name, raw_bytes)`` members into one merged buffer."""
    parts: list[bytes] = []
    for index, (name, data) in enumerate(members):
        if index > 0:
            parts.append(_MEMBER_SEPARATOR)
        parts.append(encode(f"{name}\n{HEADER_CLOSE}\n", TextEncoding.LEGACY, source=name))
        parts.append(data)
    return b"".join(parts)


def merge_directory(
    original_dir: str | Path,
    output_dir: str | Path,
    mode: MergeMode,
) -> dict[str, int]:
    """Write one merged file per scene group of *original_dir*.

    Returns:
        Mapping of written file name to member count.
    """
    source = Path(original_dir)
    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)

    names = [path.name for path in source.glob("*.txt")]
    written: dict[str, int] = {}
    for key, members in group_scene_files(names, mode).items():
        merged = merge_scene_group([(name, (source / name).read_bytes()) for name in members])
        out_name = f"{key}.txt"
        (target / out_name).write_bytes(merged)
        written[out_name] = len(members)
        logger.info("%s: %d file(s) merged", out_name, len(members))

    return written
