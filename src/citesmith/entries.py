"""Normalisation of raw BibTeX records into canonical entries.

The raw-format parser is pybtex. Person fields are kept as plain strings so the
author text reaches the style renderer exactly as written in the source; when an
entry produced elsewhere carries parsed ``Person`` objects, they are flattened
back into the ``"Last, First and Last, First"`` form.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pybtex.database import BibliographyDataError
from pybtex.database import Entry as PybtexEntry
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from .exceptions import DuplicateKeyError, MalformedEntryError


logger = logging.getLogger(__name__)

CITEKEY_FIELD = "citekey"
ENTRYTYPE_FIELD = "entrytype"
SYNTHETIC_FIELDS = frozenset({CITEKEY_FIELD, ENTRYTYPE_FIELD})


class EntryType(Enum):
    """Entry types the style renderer knows how to lay out."""

    ARTICLE = "article"
    INPROCEEDINGS = "inproceedings"
    BOOK = "book"
    PHDTHESIS = "phdthesis"
    MASTERSTHESIS = "mastersthesis"
    INBOOK = "inbook"
    INCOLLECTION = "incollection"
    BOOKLET = "booklet"
    MANUAL = "manual"
    PROCEEDINGS = "proceedings"
    TECHREPORT = "techreport"
    UNPUBLISHED = "unpublished"
    ELECTRONIC = "electronic"
    PATENT = "patent"
    PERIODICAL = "periodical"
    STANDARD = "standard"
    MISC = "misc"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, raw: str | None) -> EntryType:
        """Return the member matching ``raw`` or ``UNRECOGNIZED``."""
        if not raw:
            return cls.UNRECOGNIZED
        candidate = raw.strip().lower()
        if candidate == cls.UNRECOGNIZED.value:
            return cls.UNRECOGNIZED
        try:
            return cls(candidate)
        except ValueError:
            return cls.UNRECOGNIZED


@dataclass(frozen=True, slots=True)
class Entry:
    """Canonical bibliographic record."""

    key: str
    type: str
    fields: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def entry_type(self) -> EntryType:
        return EntryType.parse(self.type)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of a field, or ``default`` when it is absent."""
        return self.fields.get(name.lower(), default)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)


def _clean_value(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_entry(key: str, entry_type: str | None, fields: Mapping[str, Any]) -> Entry:
    """Build a canonical entry from a loosely-typed raw record."""
    raw_type = (entry_type or "").strip().lower()
    normalised: dict[str, str] = {}
    for name, value in fields.items():
        field_name = str(name).strip().lower()
        if not field_name or field_name in SYNTHETIC_FIELDS:
            continue
        text = _clean_value(value)
        if text is None:
            continue
        normalised[field_name] = text
    normalised[CITEKEY_FIELD] = key
    normalised[ENTRYTYPE_FIELD] = raw_type
    return Entry(key=key, type=raw_type, fields=MappingProxyType(normalised))


def normalize_pybtex_entry(key: str, entry: PybtexEntry) -> Entry:
    """Convert a pybtex entry, flattening parsed persons back into strings."""
    fields: dict[str, Any] = dict(entry.fields)
    for role, persons in entry.persons.items():
        names = [str(person) for person in persons]
        if names:
            fields[role] = " and ".join(names)
    return normalize_entry(key, entry.type, fields)


def parse_entries(payload: str, *, source: Path | str | None = None) -> list[Entry]:
    """Parse a BibTeX payload and normalise every entry in source order."""
    origin = str(source) if source is not None else "<inline>"
    parser = bibtex.Parser(person_fields=())
    try:
        data = parser.parse_string(payload)
    except BibliographyDataError as exc:
        raise DuplicateKeyError(f"Duplicate entry in '{origin}': {exc}") from exc
    except PybtexError as exc:
        raise MalformedEntryError(f"Failed to parse '{origin}': {exc}") from exc

    entries = [normalize_pybtex_entry(key, entry) for key, entry in data.entries.items()]
    logger.debug("Parsed %d entries from %s", len(entries), origin)
    return entries


__all__ = [
    "CITEKEY_FIELD",
    "ENTRYTYPE_FIELD",
    "Entry",
    "EntryType",
    "normalize_entry",
    "normalize_pybtex_entry",
    "parse_entries",
]
