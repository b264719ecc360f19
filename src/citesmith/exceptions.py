"""Custom exception hierarchy for the citation and bibliography engine."""

from __future__ import annotations

class CiteSmithError(RuntimeError):
    """Base exception for bibliography loading and rendering failures."""

class CollectionNotFoundError(CiteSmithError, LookupError):
    """Raised when a configured collection cannot be located."""

class NoDefaultCollectionError(CiteSmithError):
    """Raised when a citation omits its collection and no default is configured."""

class UnsupportedStyleError(CiteSmithError, ValueError):
    """Raised when a rendering style name is not one of the built-in styles."""

class MissingArgumentError(CiteSmithError, TypeError):
    """Raised when a helper is invoked without a required argument."""

class MalformedEntryError(CiteSmithError, ValueError):
    """Raised when the BibTeX parser reports a structural error."""

class DuplicateKeyError(MalformedEntryError):
    """Raised when a single source defines the same citation key twice."""

class UnsupportedEntryTypeError(CiteSmithError):
    """Raised when no layout exists for an entry type.

    The renderer catches this error and degrades to a visible marker, so a
    single unknown record never aborts a build.
    """

class UnresolvedCitationWarning(UserWarning):
    """Emitted when a cited key cannot be resolved in its collection."""

def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


__all__ = [
    "CiteSmithError",
    "CollectionNotFoundError",
    "DuplicateKeyError",
    "MalformedEntryError",
    "MissingArgumentError",
    "NoDefaultCollectionError",
    "UnresolvedCitationWarning",
    "UnsupportedEntryTypeError",
    "UnsupportedStyleError",
    "exception_messages",
]
