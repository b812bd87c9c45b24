"""Emitter feeding pipeline diagnostics into the CLI state."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from codelink.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


FENCE_DIAGNOSTIC_EVENT = "fence_diagnostic"
PAGE_WRITTEN_EVENT = "page_written"


class CliEmitter(DiagnosticEmitter):
    """Print warnings as they happen and keep events for the command summary.

    Every event lands in :meth:`CLIState.record_event`; commands drain them with
    :meth:`CLIState.consume_events` once the run is over. Progress events are
    echoed to stderr only with ``--verbose``.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self.state = state or get_cli_state()

    @property
    def debug_enabled(self) -> bool:
        return self.state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc, state=self.state)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc, state=self.state)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.state.record_event(name, payload)
        if self.state.verbosity < 1:
            return
        message = format_event_message(name, payload)
        if message:
            render_message("info", message, state=self.state)


def fence_diagnostic_rows(state: CLIState) -> list[tuple[str, int, str, str]]:
    """Drain recorded fence diagnostics as ``(document, line, kind, message)`` rows."""
    rows = [
        (
            str(event.get("document") or "-"),
            int(event.get("line") or 0),
            str(event.get("kind") or ""),
            str(event.get("message") or ""),
        )
        for event in state.consume_events(FENCE_DIAGNOSTIC_EVENT)
    ]
    rows.sort(key=lambda row: (row[0], row[1]))
    return rows


__all__ = [
    "FENCE_DIAGNOSTIC_EVENT",
    "PAGE_WRITTEN_EVENT",
    "CliEmitter",
    "fence_diagnostic_rows",
]
