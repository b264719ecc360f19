"""Render entries into HTML citation text."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging

from markupsafe import escape

from ..entries import Entry
from ..exceptions import UnsupportedEntryTypeError, UnsupportedStyleError
from .authors import format_author_full, format_author_initials, format_author_list
from .base import Markup, Segment, Style
from .layouts import COMMON_TAIL, Part, layout_for


logger = logging.getLogger(__name__)

DEFAULT_STYLE = "default"
UNTYPED = "(none)"

STYLES: Mapping[str, Style] = {
    "default": Style(name="default", format_author=format_author_full),
    "ieee": Style(name="ieee", format_author=format_author_initials),
}


def get_style(style: Style | str | None) -> Style:
    """Return the built-in style named ``style``."""
    if isinstance(style, Style):
        return style
    name = DEFAULT_STYLE if style is None else style
    try:
        return STYLES[name]
    except KeyError as exc:
        available = ", ".join(STYLES)
        raise UnsupportedStyleError(
            f"Unsupported bibliography style '{name}' (expected one of: {available})."
        ) from exc


def _render_parts(parts: Iterable[Part], entry: Entry, markup: Markup) -> list[Segment]:
    return [segment for part in parts if (segment := part.render(entry, markup)) is not None]


def _join(segments: Sequence[Segment]) -> str:
    if not segments:
        return ""
    pieces: list[str] = []
    for segment in segments[:-1]:
        pieces.append(segment.text)
        pieces.append(segment.separator)
    last = segments[-1]
    pieces.append(last.final if last.final is not None else last.text)
    return "".join(pieces)


def _terminate(text: str, markup: Markup) -> str:
    if not text or text.endswith(".") or text.endswith(f".{markup.quote_close}"):
        return text
    return f"{text}."


def render_entry(entry: Entry, style: Style | str | None = DEFAULT_STYLE) -> str:
    """Render ``entry`` as an HTML citation string."""
    active = get_style(style)
    markup = active.markup

    segments: list[Segment] = []
    author = entry.get("author")
    if author is not None:
        authors = format_author_list(author, active.format_author)
        if authors:
            segments.append(Segment(str(escape(authors))))

    try:
        layout = layout_for(entry.entry_type)
    except UnsupportedEntryTypeError:
        logger.warning(
            "Entry '%s' has unsupported type '%s'; rendering a placeholder.",
            entry.key,
            entry.type,
        )
        label = escape(entry.type or UNTYPED)
        marker = markup.flag(f"Entry Type Not Implemented: {label}")
        segments.append(Segment(marker))
        segments.extend(_render_parts(COMMON_TAIL, entry, markup))
    else:
        segments.extend(_render_parts(layout.parts, entry, markup))
        segments.extend(_render_parts(layout.tail, entry, markup))

    text = _join(segments)
    language = entry.get("language")
    if language is not None:
        text = f"{text} (in {escape(language)})" if text else f"(in {escape(language)})"
    text = _terminate(text, markup)

    doi = entry.get("doi")
    if doi is not None:
        doi_text = escape(doi)
        text += f' DOI: <a href="https://doi.org/{doi_text}">{doi_text}</a>.'
    url = entry.get("url")
    if url is not None:
        url_text = escape(url)
        text += f' <a href="{url_text}">{url_text}</a>.'
    return text.strip()


__all__ = ["DEFAULT_STYLE", "STYLES", "UNTYPED", "get_style", "render_entry"]
