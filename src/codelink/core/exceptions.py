"""Exception hierarchy shared by the code link pipeline."""

from __future__ import annotations


class CodeLinkError(RuntimeError):
    """Base exception for code link failures that abort an operation."""


class ConfigurationError(CodeLinkError):
    """Raised when a configuration file or mapping cannot be validated."""


class PublishError(CodeLinkError):
    """Raised when a batch publication cannot write its outputs."""


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


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


def describe_exception(exc: BaseException) -> str:
    """Return the message of ``exc`` followed by its root cause when they differ."""
    message = str(exc).strip()
    hint = exception_hint(exc)
    if not hint or hint in message:
        return message or type(exc).__name__
    return f"{message} ({hint})" if message else hint


__all__ = [
    "CodeLinkError",
    "ConfigurationError",
    "PublishError",
    "describe_exception",
    "exception_hint",
    "exception_messages",
]
