"""First-occurrence-wins bookkeeping for transcript entries.

The same script can be translated more than once across conversations.
:class:`EntryRegistry` remembers where each identifier was first seen so
exports keep the first translation and report the rest.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from script_guard.models.transcript import EntryLocation


class RegistrationOutcome(str, Enum):
    """Result of registering an identifier."""

    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"


class EntryRegistry:
    """Mapping from identifier to every location it was registered at."""

    def __init__(self) -> None:
        self._locations: dict[str, list[EntryLocation]] = {}

    def register(self, identifier: str, location: EntryLocation) -> RegistrationOutcome:
        """Record *identifier* at *location*.

        Returns:
            ``ACCEPTED`` the first time an identifier is seen, ``DUPLICATE``
            afterwards.
        """
        locations = self._locations.setdefault(identifier, [])
        locations.append(location)
        if len(locations) == 1:
            return RegistrationOutcome.ACCEPTED
        return RegistrationOutcome.DUPLICATE

    def first_seen(self, identifier: str) -> EntryLocation | None:
        locations = self._locations.get(identifier)
        return locations[0] if locations else None

    def duplicates(self) -> dict[str, list[EntryLocation]]:
        """Identifiers registered more than once, in first-seen order."""
        return {
            identifier: list(locations)
            for identifier, locations in self._locations.items()
            if len(locations) > 1
        }

    def missing(self, identifiers: Iterable[str]) -> list[str]:
        """Sorted *identifiers* that were never registered."""
        return sorted(name for name in set(identifiers) if name not in self._locations)

    @property
    def total(self) -> int:
        """Number of registrations, duplicates included."""
        return sum(len(locations) for locations in self._locations.values())

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._locations

    def __len__(self) -> int:
        return len(self._locations)
