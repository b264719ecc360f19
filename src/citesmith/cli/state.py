"""Shared CLI state management utilities."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import logging
import sys
from typing import TYPE_CHECKING

from citesmith.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "get_cli_state",
    "set_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Shared state controlling CLI diagnostics."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Return a lazily instantiated stdout console."""
        from rich.console import Console

        current = getattr(self._console, "file", None)
        if self._console is None or current is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Return a lazily instantiated stderr console."""
        from rich.console import Console

        current = getattr(self._err_console, "file", None)
        if self._err_console is None or current is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("citesmith_cli_state", default=None)


def get_cli_state() -> CLIState:
    """Return the CLI state of the running command, creating it if needed."""
    state = _STATE_VAR.get(None)
    if state is None:
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(*, verbosity: int | None = None, debug: bool | None = None) -> CLIState:
    """Update the CLI state and configure logging accordingly."""
    state = get_cli_state()
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    level = logging.WARNING
    if state.verbosity == 1:
        level = logging.INFO
    elif state.verbosity >= 2 or state.show_tracebacks:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("citesmith").setLevel(level)
    return state


def debug_enabled() -> bool:
    return get_cli_state().show_tracebacks


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    """Print an error and, with verbosity, the chain of underlying causes."""
    from rich.markup import escape

    state = get_cli_state()
    state.err_console.print(f"[bold red]error:[/] {escape(message)}")
    if exception is not None and state.verbosity > 0:
        for cause in exception_messages(exception)[1:]:
            state.err_console.print(f"  [dim]caused by:[/] {escape(cause)}")
