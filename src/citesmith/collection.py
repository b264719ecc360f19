"""Named, ordered collections of bibliography entries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
import logging
from pathlib import Path

from .entries import Entry, parse_entries
from .exceptions import CollectionNotFoundError, NoDefaultCollectionError


logger = logging.getLogger(__name__)

UNDEFINED_GROUP = "undefined"


class Collection(Mapping[str, Entry]):
    """Read-only mapping from citation key to entry, in insertion order."""

    __slots__ = ("_entries", "name", "source")

    def __init__(
        self,
        entries: Iterable[Entry] = (),
        *,
        name: str | None = None,
        source: Path | str | None = None,
    ) -> None:
        self.name = name
        self.source = Path(source) if source is not None else None
        self._entries: dict[str, Entry] = {}
        for entry in entries:
            if entry.key in self._entries:
                logger.warning(
                    "Duplicate key '%s' in collection '%s'; keeping the last definition.",
                    entry.key,
                    name or "<anonymous>",
                )
                # Re-insert so the surviving entry takes the later position.
                del self._entries[entry.key]
            self._entries[entry.key] = entry

    def __getitem__(self, key: str) -> Entry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"Collection(name={self.name!r}, entries={len(self._entries)})"

    def entries(self) -> list[Entry]:
        """Return the entries in collection order."""
        return list(self._entries.values())

    def derive(self, entries: Iterable[Entry]) -> Collection:
        """Return a new collection sharing this collection's identity."""
        return Collection(entries, name=self.name, source=self.source)

    def sorted_by(self, field: str, reverse: bool = False) -> Collection:
        return sort_by(self, field, reverse=reverse)

    def grouped_by(self, field: str, reverse: bool = False) -> list[Group]:
        return group_by(self, field, reverse=reverse)


@dataclass(frozen=True, slots=True)
class Group:
    """Entries sharing one value of the grouping field."""

    value: str
    entries: Collection

    def __len__(self) -> int:
        return len(self.entries)


def _sort_key(entry: Entry, field: str) -> tuple[bool, str]:
    # Missing values sort below every string.
    value = entry.get(field)
    if value is None:
        return (False, "")
    return (True, value.lower())


def sort_by(collection: Collection, field: str, reverse: bool = False) -> Collection:
    """Return a copy ordered by the lower-cased value of ``field``.

    The ascending order is stable with respect to the original order. With
    ``reverse`` the ascending order is reversed as a whole, so entries missing
    the field end up last.
    """
    ordered = sorted(collection.entries(), key=lambda entry: _sort_key(entry, field))
    if reverse:
        ordered.reverse()
    return collection.derive(ordered)


def group_by(collection: Collection, field: str, reverse: bool = False) -> list[Group]:
    """Partition a collection by the value of ``field``.

    Group labels are the distinct lower-cased values, sorted ascending (or
    descending with ``reverse``). Membership compares the entry's original
    value against the lower-cased label, so values differing only by case are
    left out of the group they were labelled under. Entries lacking the field
    form a trailing ``"undefined"`` group whatever the direction.
    """
    entries = collection.entries()
    values = sorted(
        {value.lower() for entry in entries if (value := entry.get(field)) is not None},
        reverse=reverse,
    )

    groups = [
        Group(
            value=value,
            entries=collection.derive(entry for entry in entries if entry.get(field) == value),
        )
        for value in values
    ]

    undefined = [entry for entry in entries if entry.get(field) is None]
    if undefined:
        groups.append(Group(value=UNDEFINED_GROUP, entries=collection.derive(undefined)))
    return groups


def load_collection(
    name: str,
    blob: str | bytes,
    *,
    sort_by_field: str | None = None,
    reverse: bool = False,
    source: Path | str | None = None,
) -> Collection:
    """Parse a raw BibTeX blob into a collection, applying the load-time order."""
    payload = blob.decode("utf-8") if isinstance(blob, bytes) else blob
    collection = Collection(parse_entries(payload, source=source), name=name, source=source)
    if sort_by_field:
        collection = sort_by(collection, sort_by_field, reverse=reverse)
    logger.debug("Loaded collection '%s' with %d entries", name, len(collection))
    return collection


class CollectionStore:
    """Registry of the collections available during a build."""

    def __init__(self, collections: Iterable[Collection] = ()) -> None:
        self._collections: dict[str, Collection] = {}
        for collection in collections:
            self.add(collection)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._collections)

    def add(self, collection: Collection, *, name: str | None = None) -> Collection:
        """Register a collection under ``name`` (defaults to its own name)."""
        label = name or collection.name
        if not label:
            raise ValueError("Collections must be named before they are stored.")
        self._collections[label] = collection
        return collection

    def load(
        self,
        name: str,
        blob: str | bytes,
        *,
        sort_by_field: str | None = None,
        reverse: bool = False,
        source: Path | str | None = None,
    ) -> Collection:
        """Parse ``blob`` and register the resulting collection."""
        collection = load_collection(
            name, blob, sort_by_field=sort_by_field, reverse=reverse, source=source
        )
        return self.add(collection)

    def get(self, name: str) -> Collection:
        try:
            return self._collections[name]
        except KeyError as exc:
            known = ", ".join(self._collections) or "none"
            raise CollectionNotFoundError(
                f"Unknown bibliography collection '{name}' (available: {known})."
            ) from exc

    def resolve(
        self,
        collection: Collection | str | None,
        default: str | None = None,
    ) -> Collection:
        """Return a collection object from an object, a name or the default."""
        if isinstance(collection, Collection):
            return collection
        if collection:
            return self.get(collection)
        if not default:
            raise NoDefaultCollectionError(
                "No bibliography collection given and no default collection is configured."
            )
        return self.get(default)

    def as_mapping(self) -> dict[str, Collection]:
        return dict(self._collections)

    def __contains__(self, name: object) -> bool:
        return name in self._collections

    def __iter__(self) -> Iterator[Collection]:
        return iter(self._collections.values())

    def __len__(self) -> int:
        return len(self._collections)


__all__ = [
    "UNDEFINED_GROUP",
    "Collection",
    "CollectionStore",
    "Group",
    "group_by",
    "load_collection",
    "sort_by",
]
