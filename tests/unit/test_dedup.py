"""Unit tests for first-occurrence-wins entry bookkeeping."""

from __future__ import annotations

from script_guard.dedup import EntryRegistry, RegistrationOutcome
from script_guard.models.transcript import EntryLocation


def test_first_registration_accepted() -> None:
    registry = EntryRegistry()

    outcome = registry.register("01_1600.txt", EntryLocation("t1.txt", 3))

    assert outcome is RegistrationOutcome.ACCEPTED
    assert "01_1600.txt" in registry


def test_later_registration_is_duplicate() -> None:
    """The first location is kept as the winner."""
    registry = EntryRegistry()
    first = EntryLocation("t1.txt", 3)
    second = EntryLocation("t2.txt", 10)

    registry.register("01_1600.txt", first)
    outcome = registry.register("01_1600.txt", second)

    assert outcome is RegistrationOutcome.DUPLICATE
    assert registry.first_seen("01_1600.txt") == first
    assert registry.duplicates() == {"01_1600.txt": [first, second]}


def test_first_seen_unknown() -> None:
    assert EntryRegistry().first_seen("nope.txt") is None


def test_counts() -> None:
    registry = EntryRegistry()
    registry.register("a.txt", EntryLocation("t.txt", 3))
    registry.register("b.txt", EntryLocation("t.txt", 8))
    registry.register("a.txt", EntryLocation("t.txt", 13))

    assert len(registry) == 2
    assert registry.total == 3
    assert list(registry.duplicates()) == ["a.txt"]


def test_missing_is_sorted_and_deduplicated() -> None:
    registry = EntryRegistry()
    registry.register("b.txt", EntryLocation("t.txt", 3))

    assert registry.missing(["c.txt", "a.txt", "b.txt", "a.txt"]) == ["a.txt", "c.txt"]


def test_location_str() -> None:
    assert str(EntryLocation("t1.txt", 42)) == "t1.txt line 42"
