"""Primary public API for citesmith.

Architecture
: `entries` normalises pybtex records into immutable `Entry` objects.
: `collection` groups entries into named collections that can be sorted and
  grouped without mutating the loaded data.
: `registry` keeps the citations of one page in first-citation order.
: `styles` renders an entry as HTML for the `default` and `ieee` styles.
: `helpers` exposes the operations called from templates; they all take an
  explicit `RenderContext`.
: `pipeline`, `jinja` and `mkdocs_plugin` connect the engine to its hosts.

Usage Example

```pycon
>>> from citesmith import BibliographyPlugin, cite
>>> files = {"refs.bib": "@article{smith2020, author={Smith, John}, title={On Widgets}, year={2020}}"}
>>> metadata = {}
>>> context = BibliographyPlugin({"collections": {"refs": "refs.bib"}})(files, metadata)
>>> page = context.for_page()
>>> str(cite(page, "smith2020"))
'[<a href="#bibentry_smith2020">smith2020</a>]'
```
"""

from __future__ import annotations

from .collection import (
    UNDEFINED_GROUP,
    Collection,
    CollectionStore,
    Group,
    group_by,
    load_collection,
    sort_by,
)
from .config import BibliographyConfig, KeyStyle
from .context import RenderContext
from .entries import Entry, EntryType, normalize_entry, normalize_pybtex_entry, parse_entries
from .exceptions import (
    CiteSmithError,
    CollectionNotFoundError,
    DuplicateKeyError,
    MalformedEntryError,
    MissingArgumentError,
    NoDefaultCollectionError,
    UnresolvedCitationWarning,
    UnsupportedEntryTypeError,
    UnsupportedStyleError,
)
from .helpers import bibliography, cite, format_entry, group, sort
from .pipeline import BibliographyPlugin
from .registry import Citation, CitationRegistry
from .styles import STYLES, Style, get_style, render_entry
from .version import get_version


__version__ = get_version()

__all__ = [
    "STYLES",
    "UNDEFINED_GROUP",
    "BibliographyConfig",
    "BibliographyPlugin",
    "Citation",
    "CitationRegistry",
    "CiteSmithError",
    "Collection",
    "CollectionNotFoundError",
    "CollectionStore",
    "DuplicateKeyError",
    "Entry",
    "EntryType",
    "Group",
    "KeyStyle",
    "MalformedEntryError",
    "MissingArgumentError",
    "NoDefaultCollectionError",
    "RenderContext",
    "Style",
    "UnresolvedCitationWarning",
    "UnsupportedEntryTypeError",
    "UnsupportedStyleError",
    "__version__",
    "bibliography",
    "cite",
    "format_entry",
    "get_style",
    "get_version",
    "group",
    "group_by",
    "load_collection",
    "normalize_entry",
    "normalize_pybtex_entry",
    "parse_entries",
    "render_entry",
    "sort",
    "sort_by",
]
