"""Operations exposed to the template engine.

Every helper receives the page :class:`~citesmith.context.RenderContext`
explicitly. Text-producing helpers return :class:`markupsafe.Markup` so the
host embeds the result without escaping it again.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import warnings

from markupsafe import Markup, escape

from .collection import Collection, Group
from .config import KeyStyle
from .context import RenderContext
from .entries import CITEKEY_FIELD, ENTRYTYPE_FIELD, Entry, normalize_entry
from .exceptions import MissingArgumentError, UnresolvedCitationWarning, UnsupportedStyleError
from .registry import Citation
from .styles import get_style, render_entry


ANCHOR_PREFIX = "bibentry_"
CITATION_DELIMITER = ", "
MISSING_STYLE = 'class="citation-missing" style="color: red;"'

CollectionArg = Collection | Group | str | None


def _anchor(key: str) -> str:
    return str(escape(f"{ANCHOR_PREFIX}{key}"))


def _resolve_keystyle(context: RenderContext, keystyle: KeyStyle | str | None) -> KeyStyle:
    if keystyle is None:
        return context.keystyle
    try:
        return KeyStyle(keystyle)
    except ValueError as exc:
        raise UnsupportedStyleError(
            f"Unsupported key style '{keystyle}' (expected 'citekey' or 'numbered')."
        ) from exc


def _resolve_collection(context: RenderContext, collection: CollectionArg) -> Collection:
    if isinstance(collection, Group):
        return collection.entries
    return context.resolve(collection)


def _split_keys(keys: str | Iterable[str] | None) -> list[str]:
    if keys is None:
        return []
    if isinstance(keys, str):
        return keys.split()
    return [str(key).strip() for key in keys if str(key).strip()]


def _marker(key: str, number: int, keystyle: KeyStyle) -> str:
    return str(number) if keystyle is KeyStyle.NUMBERED else key


def cite(
    context: RenderContext,
    keys: str | Iterable[str] | None,
    collection: CollectionArg = None,
    *,
    keystyle: KeyStyle | str | None = None,
) -> Markup:
    """Record citations on the page registry and return the inline reference.

    ``keys`` is a sequence of citation keys or a whitespace-separated string.
    """
    target = _resolve_collection(context, collection)
    active_keystyle = _resolve_keystyle(context, keystyle)
    names = _split_keys(keys)
    if not names:
        raise MissingArgumentError("cite() requires at least one citation key.")

    fragments: list[str] = []
    for key in names:
        entry = target.get(key)
        citation = context.registry.register(key, entry)
        label = escape(_marker(key, citation.number, active_keystyle))
        if entry is None:
            warnings.warn(
                f"Reference to '{key}' not found in collection '{target.name}'.",
                UnresolvedCitationWarning,
                stacklevel=2,
            )
            fragments.append(f'<a href="#{_anchor(key)}" {MISSING_STYLE}>{label}</a>')
        else:
            fragments.append(f'<a href="#{_anchor(key)}">{label}</a>')
    return Markup(f"[{CITATION_DELIMITER.join(fragments)}]")


def bibliography(
    context: RenderContext,
    collection: CollectionArg = None,
    *,
    keystyle: KeyStyle | str | None = None,
    style: str | None = None,
) -> Markup:
    """Render a collection as an HTML list.

    Without a collection, the entries cited so far on the page are listed in
    citation order so that numbered markers match the inline references.
    """
    active_style = get_style(style or context.style)
    active_keystyle = _resolve_keystyle(context, keystyle)

    items: list[tuple[str, int, Entry | None]]
    if collection is None:
        items = [(item.key, item.number, item.entry) for item in context.registry]
    else:
        target = _resolve_collection(context, collection)
        # Cited entries keep their inline number; the rest fall back to position.
        items = [
            (entry.key, context.registry.number(entry.key) or position, entry)
            for position, entry in enumerate(target.values(), start=1)
        ]

    lines = ['<ul class="bibliography">']
    for key, number, entry in items:
        marker = escape(_marker(key, number, active_keystyle))
        label = f'<span class="bibkey">[{marker}]</span>'
        if entry is None:
            body = f"<b {MISSING_STYLE}>Missing reference: {escape(key)}</b>"
            lines.append(f'<li id="{_anchor(key)}" class="bibentry-missing">{label} {body}</li>')
        else:
            body = render_entry(entry, active_style)
            lines.append(f'<li id="{_anchor(key)}">{label} {body}</li>')
    lines.append("</ul>")
    return Markup("\n".join(lines))


def _coerce_entry(entry: Entry | Citation | Mapping[str, str]) -> Entry | None:
    if isinstance(entry, Entry):
        return entry
    if isinstance(entry, Citation):
        return entry.entry
    if isinstance(entry, Mapping):
        key = str(entry.get(CITEKEY_FIELD, ""))
        return normalize_entry(key, entry.get(ENTRYTYPE_FIELD), entry)
    raise MissingArgumentError(
        f"Cannot format a bibliography entry from {type(entry).__name__!r}."
    )


def format_entry(
    context: RenderContext,
    entry: Entry | Citation | Mapping[str, str] | None,
    *,
    style: str | None = None,
) -> Markup:
    """Render a single entry."""
    if entry is None:
        raise MissingArgumentError("format_entry() requires an entry to format.")
    resolved = _coerce_entry(entry)
    if resolved is None:
        key = entry.key if isinstance(entry, Citation) else ""
        return Markup(f"<b {MISSING_STYLE}>Missing reference: {escape(key)}</b>")
    return Markup(render_entry(resolved, style or context.style))


def sort(
    context: RenderContext,
    collection: CollectionArg,
    field: str | None = None,
    reverse: bool = False,
) -> Collection:
    """Return ``collection`` ordered by ``field``."""
    if collection is None:
        raise MissingArgumentError("sort() requires a collection.")
    if not field:
        raise MissingArgumentError("sort() requires a field to sort by.")
    return _resolve_collection(context, collection).sorted_by(field, reverse=reverse)


def group(
    context: RenderContext,
    collection: CollectionArg,
    field: str | None = None,
    reverse: bool = False,
) -> list[Group]:
    """Return the groups of ``collection`` for ``field``."""
    if collection is None:
        raise MissingArgumentError("group() requires a collection.")
    if not field:
        raise MissingArgumentError("group() requires a field to group by.")
    return _resolve_collection(context, collection).grouped_by(field, reverse=reverse)


__all__ = [
    "ANCHOR_PREFIX",
    "bibliography",
    "cite",
    "format_entry",
    "group",
    "sort",
]
