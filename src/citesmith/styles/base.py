"""Primitives shared by the style renderer and the entry layouts."""

from __future__ import annotations

from dataclasses import dataclass

from .authors import AuthorFormatter


@dataclass(frozen=True, slots=True)
class Markup:
    """HTML decorations wrapped around individual fields."""

    quote_open: str = "&ldquo;"
    quote_close: str = "&rdquo;"
    emphasis_open: str = "<i>"
    emphasis_close: str = "</i>"
    flag_open: str = '<b class="entry-type-unsupported" style="color: red;">'
    flag_close: str = "</b>"

    def quote(self, text: str, punctuation: str = ",") -> str:
        return f"{self.quote_open}{text}{punctuation}{self.quote_close}"

    def emphasize(self, text: str) -> str:
        return f"{self.emphasis_open}{text}{self.emphasis_close}"

    def flag(self, text: str) -> str:
        return f"{self.flag_open}{text}{self.flag_close}"


@dataclass(frozen=True, slots=True)
class Segment:
    """Rendered fragment of an entry and the separator that follows it.

    ``final`` replaces ``text`` when the segment closes the citation.
    """

    text: str
    separator: str = ", "
    final: str | None = None


@dataclass(frozen=True, slots=True)
class Style:
    """Named rendering style."""

    name: str
    format_author: AuthorFormatter
    markup: Markup = Markup()


__all__ = ["Markup", "Segment", "Style"]
