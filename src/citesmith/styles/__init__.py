"""Citation styles.

Architecture
: `render_entry` is a pure function of an entry and a style. Both built-in
  styles (`default` and `ieee`) share the per-type layouts declared in
  `layouts.py` and differ in how author names are written.
: Layouts are data. Each entry type maps to an ordered tuple of parts and each
  part decides on its own whether the fields it needs are present.
"""

from __future__ import annotations

from .authors import (
    format_author_full,
    format_author_initials,
    format_author_list,
    join_authors,
    split_authors,
)
from .base import Markup, Segment, Style
from .layouts import LAYOUTS, Layout, layout_for
from .renderer import DEFAULT_STYLE, STYLES, get_style, render_entry


__all__ = [
    "DEFAULT_STYLE",
    "LAYOUTS",
    "STYLES",
    "Layout",
    "Markup",
    "Segment",
    "Style",
    "format_author_full",
    "format_author_initials",
    "format_author_list",
    "get_style",
    "join_authors",
    "layout_for",
    "render_entry",
    "split_authors",
]
