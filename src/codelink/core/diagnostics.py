"""Fence diagnostics and the emitters used to surface them.

A fence that cannot be resolved never aborts the render. The resolver turns
every failure into a :class:`Diagnostic`, the renderer prints it in place of
the code block, and an emitter reports it to whoever drives the conversion
(logging for library use, rich consoles for the CLI).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Closed set of fence resolution failures."""

    FILE_NOT_FOUND = "FileNotFound"
    PROJECT_NOT_FOUND = "ProjectNotFound"
    NO_PROJECT_SPECIFIED = "NoProjectSpecified"
    CONFLICTING_OPTIONS = "ConflictingOptions"
    REGION_NOT_FOUND = "RegionNotFound"
    MULTIPLE_REGIONS_FOUND = "MultipleRegionsFound"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """User-visible message produced instead of a resolved code link."""

    kind: DiagnosticKind
    message: str

    @classmethod
    def file_not_found(cls, path: str) -> Diagnostic:
        return cls(DiagnosticKind.FILE_NOT_FOUND, f"File not found: {path}")

    @classmethod
    def project_not_found(cls, path: str) -> Diagnostic:
        return cls(DiagnosticKind.PROJECT_NOT_FOUND, f"Project not found: {path}")

    @classmethod
    def no_project_specified(cls) -> Diagnostic:
        return cls(DiagnosticKind.NO_PROJECT_SPECIFIED, "No project file or package specified")

    @classmethod
    def conflicting_options(cls) -> Diagnostic:
        return cls(
            DiagnosticKind.CONFLICTING_OPTIONS,
            "Can't specify both --project and --package",
        )

    @classmethod
    def region_not_found(cls, name: str, file_path: str) -> Diagnostic:
        return cls(
            DiagnosticKind.REGION_NOT_FOUND,
            f'Region "{name}" not found in file {file_path}',
        )

    @classmethod
    def multiple_regions_found(cls, name: str) -> Diagnostic:
        return cls(DiagnosticKind.MULTIPLE_REGIONS_FOUND, f"Multiple regions found: {name}")

    def __str__(self) -> str:
        return self.message


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "page_written":
        target = data.get("target") or "<unknown>"
        count = data.get("diagnostics") or 0
        suffix = f" ({count} diagnostic{'s' if count != 1 else ''})" if count else ""
        return f"Wrote {target}{suffix}"

    return None


__all__ = [
    "Diagnostic",
    "DiagnosticEmitter",
    "DiagnosticKind",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
