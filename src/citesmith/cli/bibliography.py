"""Bibliography-related CLI presenters."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import TYPE_CHECKING

from citesmith.collection import Collection
from citesmith.entries import SYNTHETIC_FIELDS, Entry

from .state import get_cli_state


if TYPE_CHECKING:
    from rich.panel import Panel


def build_entry_panel(entry: Entry) -> Panel:
    """Create a Rich panel that visualises a single bibliography entry."""
    from rich import box
    from rich.panel import Panel
    from rich.table import Table
    from rich.text import Text

    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold green", no_wrap=True)
    grid.add_column()

    fields = {
        name: value for name, value in entry.fields.items() if name not in SYNTHETIC_FIELDS
    }
    for label, name in (("Title", "title"), ("Authors", "author"), ("Year", "year")):
        value = fields.pop(name, None)
        if value:
            grid.add_row(label, Text(value))

    venue = fields.pop("journal", None) or fields.pop("booktitle", None)
    if venue:
        grid.add_row("Venue", Text(venue))

    for name, value in sorted(fields.items()):
        grid.add_row(name.title(), Text(value))

    title = f"{entry.key} ({entry.type or 'unknown'})"
    return Panel(grid, title=Text(title), title_align="left", box=box.SIMPLE)


def print_collection_overview(collections: Iterable[Collection]) -> None:
    """Render every entry of the given collections followed by a summary."""
    from rich import box
    from rich.table import Table
    from rich.text import Text

    console = get_cli_state().console
    per_type: Counter[str] = Counter()
    files_table = Table(
        title="Bibliography Files",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    files_table.add_column("Collection", overflow="fold")
    files_table.add_column("Source", overflow="fold")
    files_table.add_column("Entries", justify="right")

    total = 0
    for collection in collections:
        files_table.add_row(
            Text(collection.name or "-"),
            Text(str(collection.source) if collection.source else "-"),
            str(len(collection)),
        )
        for entry in collection.values():
            per_type[entry.type or "unknown"] += 1
            console.print(build_entry_panel(entry))
        total += len(collection)

    console.print(files_table)

    summary = Table(
        title="Bibliography Summary",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    summary.add_column("Entry type", style="bold")
    summary.add_column("Count", justify="right")
    for entry_type, count in per_type.most_common():
        summary.add_row(entry_type, str(count))
    summary.add_row(Text("Total", style="bold"), Text(str(total)))
    console.print(summary)


__all__ = ["build_entry_panel", "print_collection_overview"]
