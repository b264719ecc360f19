"""Author list formatting for the built-in styles."""

from __future__ import annotations

from collections.abc import Callable, Sequence


AUTHOR_SEPARATOR = " and "
NAME_SEPARATOR = ", "

AuthorFormatter = Callable[[str], str]


def split_authors(value: str) -> list[str]:
    """Split a BibTeX author field on the literal ``" and "`` separator."""
    return [author.strip() for author in value.split(AUTHOR_SEPARATOR) if author.strip()]


def _initials(names: str) -> str:
    return " ".join(f"{token[0]}." for token in names.split(" ") if token)


def format_author_full(author: str) -> str:
    """Reorder ``"Last, First"`` into ``"First Last"``."""
    parts = author.split(NAME_SEPARATOR)
    if len(parts) == 2:
        last_name, first_name = parts
        return f"{first_name} {last_name}".strip()
    return author


def format_author_initials(author: str) -> str:
    """Abbreviate given names to initials: ``"Smith, John"`` becomes ``"J. Smith"``."""
    parts = author.split(NAME_SEPARATOR)
    if len(parts) == 2:
        last_name, first_name = parts
        if not first_name:
            return last_name
        return f"{first_name[0]}. {last_name}"
    if len(parts) > 2:
        return author

    if "." in author:
        given, _, last_name = author.rpartition(".")
        return f"{_initials(given + '.')} {last_name.strip()}".strip()

    tokens = [token for token in author.split(" ") if token]
    if len(tokens) < 2:
        return author
    return f"{_initials(' '.join(tokens[:-1]))} {tokens[-1]}"


def join_authors(authors: Sequence[str]) -> str:
    """Join names as ``A``, ``A and B`` or ``A, B, and C``."""
    if not authors:
        return ""
    if len(authors) == 1:
        return authors[0]
    if len(authors) == 2:
        return f"{authors[0]} and {authors[1]}"
    return ", ".join(authors[:-1]) + f", and {authors[-1]}"


def format_author_list(value: str, formatter: AuthorFormatter) -> str:
    """Split, format and join the authors of an entry."""
    return join_authors([formatter(author) for author in split_authors(value)])


__all__ = [
    "AuthorFormatter",
    "format_author_full",
    "format_author_initials",
    "format_author_list",
    "join_authors",
    "split_authors",
]
