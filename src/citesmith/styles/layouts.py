"""Per-entry-type composition recipes.

Every entry type maps to a :class:`Layout`, an ordered tuple of parts. A part
reads one or more fields from the entry and returns a :class:`Segment`, or
``None`` when the fields it needs are absent so that neither its decoration nor
its separator reaches the output.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from markupsafe import escape

from ..entries import Entry, EntryType
from ..exceptions import UnsupportedEntryTypeError
from .base import Markup, Segment


def _value(entry: Entry, name: str) -> str | None:
    value = entry.get(name)
    return str(escape(value)) if value is not None else None


class Part(Protocol):
    def render(self, entry: Entry, markup: Markup) -> Segment | None: ...


@dataclass(frozen=True, slots=True)
class Text:
    """Plain field value with optional literal prefix."""

    field: str
    prefix: str = ""

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        value = _value(entry, self.field)
        if value is None:
            return None
        return Segment(f"{self.prefix}{value}")


@dataclass(frozen=True, slots=True)
class Quoted:
    """Field between quotation marks, the comma kept inside the closing quote."""

    field: str = "title"

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        value = _value(entry, self.field)
        if value is None:
            return None
        return Segment(markup.quote(value), separator=" ", final=markup.quote(value, "."))


@dataclass(frozen=True, slots=True)
class Emphasized:
    """Italic field, followed by a full stop when it is a title."""

    field: str = "title"
    separator: str = ". "

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        value = _value(entry, self.field)
        if value is None:
            return None
        return Segment(markup.emphasize(value), separator=self.separator)


@dataclass(frozen=True, slots=True)
class Volume:
    """``vol. V, no. N``; the number is only shown alongside a volume."""

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        volume = _value(entry, "volume")
        if volume is None:
            return None
        number = _value(entry, "number")
        text = f"vol. {volume}" if number is None else f"vol. {volume}, no. {number}"
        return Segment(text)


@dataclass(frozen=True, slots=True)
class BookTitle:
    """``in <i>Booktitle (Series)</i>``."""

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        booktitle = _value(entry, "booktitle")
        if booktitle is None:
            return None
        series = _value(entry, "series")
        if series is not None:
            booktitle = f"{booktitle} ({series})"
        return Segment(f"in {markup.emphasize(booktitle)}")


@dataclass(frozen=True, slots=True)
class Place:
    """``Address: Publisher`` with either side optional."""

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        address = _value(entry, "address")
        publisher = _value(entry, "publisher")
        if address is not None and publisher is not None:
            return Segment(f"{address}: {publisher}")
        if address is not None:
            return Segment(address)
        if publisher is not None:
            return Segment(publisher)
        return None


@dataclass(frozen=True, slots=True)
class EditedBy:
    """``Editor, Ed.``"""

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        editor = _value(entry, "editor")
        if editor is None:
            return None
        return Segment(f"{editor}, Ed.", separator=" ")


@dataclass(frozen=True, slots=True)
class FirstOf:
    """First present field among ``fields``."""

    fields: tuple[str, ...]

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        for name in self.fields:
            value = _value(entry, name)
            if value is not None:
                return Segment(value)
        return None


@dataclass(frozen=True, slots=True)
class TypeLabel:
    """The ``type`` field, or a literal when the entry does not define one."""

    default: str

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        return Segment(_value(entry, "type") or str(escape(self.default)))


@dataclass(frozen=True, slots=True)
class Patent:
    """``Nationality Patent Number``."""

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        nationality = _value(entry, "nationality")
        number = _value(entry, "number")
        pieces = []
        if nationality is not None:
            pieces.append(nationality)
        if number is not None:
            pieces.append(f"Patent {number}")
        if not pieces:
            return None
        return Segment(" ".join(pieces))


@dataclass(frozen=True, slots=True)
class Parenthesized:
    field: str

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        value = _value(entry, self.field)
        if value is None:
            return None
        return Segment(f"({value})")


@dataclass(frozen=True, slots=True)
class Date:
    """``Month Year`` with either side optional."""

    def render(self, entry: Entry, markup: Markup) -> Segment | None:
        pieces = [value for name in ("month", "year") if (value := _value(entry, name))]
        if not pieces:
            return None
        return Segment(" ".join(pieces))


@dataclass(frozen=True, slots=True)
class Layout:
    """Ordered parts of an entry type followed by its trailing parts."""

    parts: tuple[Part, ...]
    tail: tuple[Part, ...]


COMMON_TAIL: tuple[Part, ...] = (Date(), Text("pages", prefix="pp. "))
CHAPTER_TAIL: tuple[Part, ...] = (
    Date(),
    Text("chapter", prefix="ch. "),
    Text("pages", prefix="pp. "),
)

_IN_BOOK = Layout(
    parts=(Quoted(), BookTitle(), EditedBy(), Place()),
    tail=CHAPTER_TAIL,
)

LAYOUTS: Mapping[EntryType, Layout] = {
    EntryType.ARTICLE: Layout(
        parts=(Quoted(), Emphasized("journal", separator=", "), Volume()),
        tail=COMMON_TAIL,
    ),
    EntryType.INPROCEEDINGS: Layout(
        parts=(Quoted(), BookTitle(), Volume(), Text("address"), Text("publisher")),
        tail=COMMON_TAIL,
    ),
    EntryType.BOOK: Layout(
        parts=(Emphasized(), Place()),
        tail=COMMON_TAIL,
    ),
    EntryType.PHDTHESIS: Layout(
        parts=(Quoted(), TypeLabel("PhD Dissertation"), Text("school"), Place()),
        tail=COMMON_TAIL,
    ),
    EntryType.MASTERSTHESIS: Layout(
        parts=(Quoted(), TypeLabel("Master's Thesis"), Text("school"), Place()),
        tail=COMMON_TAIL,
    ),
    EntryType.INBOOK: _IN_BOOK,
    EntryType.INCOLLECTION: _IN_BOOK,
    EntryType.BOOKLET: Layout(
        parts=(Emphasized(), Text("address"), EditedBy(), Text("publisher")),
        tail=COMMON_TAIL,
    ),
    EntryType.MANUAL: Layout(
        parts=(Emphasized(), Text("edition"), Text("organization"), Text("address")),
        tail=COMMON_TAIL,
    ),
    EntryType.PROCEEDINGS: Layout(
        parts=(
            Text("editor"),
            Emphasized(),
            Volume(),
            Text("organization"),
            Text("address"),
            Text("publisher"),
        ),
        tail=COMMON_TAIL,
    ),
    EntryType.TECHREPORT: Layout(
        parts=(
            Quoted(),
            Text("institution"),
            Text("address"),
            Text("type"),
            Text("number"),
        ),
        tail=COMMON_TAIL,
    ),
    EntryType.UNPUBLISHED: Layout(
        parts=(Quoted(), Text("note")),
        tail=COMMON_TAIL,
    ),
    EntryType.ELECTRONIC: Layout(
        parts=(Quoted(), Text("organization"), Text("address"), Text("note")),
        tail=COMMON_TAIL,
    ),
    EntryType.PATENT: Layout(
        parts=(Quoted(), Patent(), Text("address"), Text("note")),
        tail=COMMON_TAIL,
    ),
    EntryType.PERIODICAL: Layout(
        parts=(
            Text("editor"),
            Emphasized(),
            Parenthesized("series"),
            Volume(),
            Text("organization"),
            Text("note"),
        ),
        tail=COMMON_TAIL,
    ),
    EntryType.STANDARD: Layout(
        parts=(
            Emphasized(),
            Text("type"),
            Text("number"),
            FirstOf(("organization", "institution")),
            Text("note"),
        ),
        tail=COMMON_TAIL,
    ),
    EntryType.MISC: Layout(
        parts=(Quoted(), FirstOf(("organization", "institution")), Text("note")),
        tail=COMMON_TAIL,
    ),
}


def layout_for(entry_type: EntryType) -> Layout:
    """Return the layout registered for ``entry_type``."""
    try:
        return LAYOUTS[entry_type]
    except KeyError as exc:
        raise UnsupportedEntryTypeError(
            f"No layout registered for entry type '{entry_type.value}'."
        ) from exc


__all__ = [
    "CHAPTER_TAIL",
    "COMMON_TAIL",
    "LAYOUTS",
    "BookTitle",
    "Date",
    "EditedBy",
    "Emphasized",
    "FirstOf",
    "Layout",
    "Part",
    "Parenthesized",
    "Patent",
    "Place",
    "Quoted",
    "Text",
    "TypeLabel",
    "layout_for",
]
