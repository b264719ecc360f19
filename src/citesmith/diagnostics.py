"""Diagnostic abstractions shared by the pipeline hosts."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface structured build events."""

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every event."""

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards events to the standard logging module."""

    def __init__(self, *, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "collection_loaded":
        collection = data.get("name") or "<unnamed>"
        count = data.get("entries", 0)
        source = data.get("source")
        suffix = f" from {source}" if source else ""
        return f"Loaded bibliography collection '{collection}' ({count} entries){suffix}"

    if name == "page_citations":
        page = data.get("page") or "<page>"
        cited = data.get("cited", 0)
        missing = data.get("missing", 0)
        if not cited:
            return None
        detail = f", {missing} unresolved" if missing else ""
        return f"{page}: {cited} citation(s){detail}"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
