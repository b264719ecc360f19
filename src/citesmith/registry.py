"""Page-scoped registry of cited references."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .collection import Collection
from .entries import Entry


@dataclass(frozen=True, slots=True)
class Citation:
    """A cited key together with its page number and resolved entry."""

    key: str
    number: int
    entry: Entry | None = None

    @property
    def missing(self) -> bool:
        """Return True when the key did not resolve to an entry."""
        return self.entry is None


@dataclass(slots=True)
class CitationRegistry:
    """Track references in first-citation order.

    A registry belongs to one rendered page. The first registration of a key
    fixes its number; later registrations return the existing citation.
    Unresolved keys still consume a number.
    """

    _citations: dict[str, Citation] = field(default_factory=dict)

    def register(self, key: str, entry: Entry | None = None) -> Citation:
        """Record ``key`` unless already cited and return its citation."""
        existing = self._citations.get(key)
        if existing is not None:
            return existing
        citation = Citation(key=key, number=len(self._citations) + 1, entry=entry)
        self._citations[key] = citation
        return citation

    def get(self, key: str) -> Citation | None:
        return self._citations.get(key)

    def number(self, key: str) -> int | None:
        """Return the 1-based citation number of ``key`` when it was cited."""
        citation = self._citations.get(key)
        return citation.number if citation is not None else None

    def keys(self) -> list[str]:
        return list(self._citations)

    def citations(self) -> list[Citation]:
        """Return every citation in first-citation order."""
        return list(self._citations.values())

    def to_collection(self, name: str | None = None) -> Collection:
        """Return the resolved entries as a collection, in citation order."""
        return Collection(
            (citation.entry for citation in self._citations.values() if citation.entry),
            name=name,
        )

    def clear(self) -> None:
        """Reset the registry to its initial empty state."""
        self._citations.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._citations

    def __iter__(self) -> Iterator[Citation]:
        return iter(self._citations.values())

    def __len__(self) -> int:
        return len(self._citations)


__all__ = ["Citation", "CitationRegistry"]
