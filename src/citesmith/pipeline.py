"""Document-pipeline stage loading bibliography collections.

The pipeline hands over a mutable file map (path to contents) and a shared
metadata mapping. Configured BibTeX sources are consumed: they are parsed into
collections and removed from the file map so they are not published verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
import logging
from typing import Any

from .collection import CollectionStore
from .config import BibliographyConfig
from .context import RenderContext
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import CollectionNotFoundError


logger = logging.getLogger(__name__)

METADATA_KEY = "bibliography"


class BibliographyPlugin:
    """Callable pipeline stage: ``plugin(files, metadata) -> RenderContext``."""

    def __init__(
        self,
        config: BibliographyConfig | Mapping[str, Any] | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        if isinstance(config, BibliographyConfig):
            self.config = config
        else:
            self.config = BibliographyConfig.model_validate(dict(config or {}))
        self.emitter = emitter or NullEmitter()

    def load(self, files: MutableMapping[str, Any]) -> CollectionStore:
        """Consume the configured sources from ``files`` into a store."""
        store = CollectionStore()
        for name, source in self.config.source_paths().items():
            if source not in files:
                raise CollectionNotFoundError(
                    f"Bibliography source '{source}' for collection '{name}' "
                    "is missing from the input files."
                )
            collection = store.load(
                name,
                _contents(files[source]),
                sort_by_field=self.config.sort_by,
                reverse=self.config.reverse_order,
                source=source,
            )
            del files[source]
            self.emitter.event(
                "collection_loaded",
                {"name": name, "entries": len(collection), "source": source},
            )
        return store

    def __call__(
        self,
        files: MutableMapping[str, Any],
        metadata: MutableMapping[str, Any],
    ) -> RenderContext:
        store = self.load(files)
        context = RenderContext.from_config(self.config, store)
        metadata[METADATA_KEY] = context.namespace()
        logger.debug("Published bibliography namespace with %d collections", len(store))
        return context


def _contents(value: Any) -> str | bytes:
    # File maps carry raw bytes, text, or objects exposing ``contents``.
    if isinstance(value, str | bytes):
        return value
    if isinstance(value, Mapping) and "contents" in value:
        return value["contents"]
    contents = getattr(value, "contents", None)
    if isinstance(contents, str | bytes):
        return contents
    raise TypeError(f"Unsupported file payload of type {type(value).__name__!r}.")


__all__ = ["METADATA_KEY", "BibliographyPlugin"]
