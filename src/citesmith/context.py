"""Rendering context threaded through every helper call."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .collection import Collection, CollectionStore
from .config import BibliographyConfig, KeyStyle
from .registry import CitationRegistry
from .styles import DEFAULT_STYLE


@dataclass
class RenderContext:
    """Collections, rendering defaults and the citation registry of one page.

    The store is shared between pages and never mutated after load. The
    registry is owned by a single page: use :meth:`for_page` to obtain a
    context with a fresh registry before rendering the next page.
    """

    store: CollectionStore = field(default_factory=CollectionStore)
    default: str | None = None
    style: str = DEFAULT_STYLE
    keystyle: KeyStyle = KeyStyle.CITEKEY
    registry: CitationRegistry = field(default_factory=CitationRegistry)

    @classmethod
    def from_config(cls, config: BibliographyConfig, store: CollectionStore) -> RenderContext:
        return cls(
            store=store,
            default=config.default,
            style=config.style,
            keystyle=config.keystyle,
        )

    def for_page(self) -> RenderContext:
        """Return a copy sharing the store but owning an empty registry."""
        return replace(self, registry=CitationRegistry())

    def resolve(self, collection: Collection | str | None) -> Collection:
        return self.store.resolve(collection, self.default)

    def namespace(self) -> dict[str, object]:
        """Return the bibliography namespace published into build metadata."""
        return {
            "collections": self.store.as_mapping(),
            "default": self.default,
            "style": self.style,
            "keystyle": self.keystyle.value,
        }


__all__ = ["RenderContext"]
