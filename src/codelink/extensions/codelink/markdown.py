"""Python-Markdown extension replacing annotated C# fences with linked source files."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from pathlib import PurePath
from typing import Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from ...core.config import CodeLinkConfig
from ...core.diagnostics import Diagnostic, DiagnosticEmitter, LoggingEmitter
from ...core.filesystem import DirectoryAccessor, FileSystemDirectoryAccessor
from ...core.resolver import FenceResolver
from .blocks import (
    FenceBlock,
    LineAction,
    closes_fence,
    container_prefix,
    opening_fence,
    plain_fence_line,
    strip_container,
)
from .renderer import render_block


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FenceDiagnostic:
    """Diagnostic raised by one fence of a converted document."""

    diagnostic: Diagnostic
    line: int
    document: str | None = None

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def describe(self) -> str:
        """Return the message prefixed with its ``document:line`` location when known."""
        if not self.document:
            return self.message
        return f"{self.document}:{self.line}: {self.message}"

    def payload(self) -> dict[str, Any]:
        return {
            "kind": self.diagnostic.kind.value,
            "message": self.diagnostic.message,
            "line": self.line,
            "document": self.document,
        }


class _CodeLinkPreprocessor(Preprocessor):
    """Swap code link fences for stashed HTML before the fenced code processor runs."""

    def __init__(self, md: Markdown, extension: CodeLinkExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, lines: list[str]) -> list[str]:  # type: ignore[override]
        resolver = self.extension.resolver
        current_directory = self.extension.current_directory_for(self.md)
        document = getattr(self.md, "codelink_document", None)
        tab_length = self.md.tab_length

        result: list[str] = []
        index = 0
        total = len(lines)
        other_fence: tuple[str, int, str] | None = None

        while index < total:
            line = lines[index]

            if other_fence is not None:
                char, length, prefix = other_fence
                inner = strip_container(line, prefix)
                if inner is None:
                    other_fence = None
                    continue
                result.append(line)
                if closes_fence(inner, char, length):
                    other_fence = None
                index += 1
                continue

            prefix = container_prefix(lines, index, tab_length=tab_length)
            inner = line[len(prefix) :]
            block = FenceBlock.open(inner, resolver.parse, line_number=index + 1)
            if block is None:
                marker = opening_fence(inner)
                if marker is not None:
                    other_fence = (marker.char, marker.length, prefix)
                    line = prefix + plain_fence_line(marker)
                result.append(line)
                index += 1
                continue

            block.attach(resolver.resolve(block.info, current_directory))
            index += 1
            while index < total:
                inner = strip_container(lines[index], prefix)
                if inner is None:
                    block.close()
                    break
                index += 1
                if block.feed(inner) is LineAction.STOP:
                    break
            else:
                block.close()

            logger.debug(
                "Code link fence at %s:%d closed (%s).",
                document or "<document>",
                block.line_number,
                type(block.result).__name__,
            )
            if isinstance(block.result, Diagnostic):
                self.extension.report(
                    FenceDiagnostic(block.result, block.line_number, document)
                )

            placeholder = self.md.htmlStash.store(render_block(block, resolver.config))
            blank = prefix.rstrip()
            result.extend([blank, prefix + placeholder, blank])

        return result


class CodeLinkExtension(Extension):
    """Register the code link preprocessor on a Markdown instance.

    Linked paths resolve against ``accessor`` when given, otherwise against a
    file system accessor rooted at the ``root`` option. Any :class:`CodeLinkConfig`
    field may also be passed as an extension option. The directory of the
    document being converted comes from ``md.codelink_current_directory`` when
    set, falling back to the ``current_directory`` option.
    """

    def __init__(
        self,
        *,
        accessor: DirectoryAccessor | None = None,
        emitter: DiagnosticEmitter | None = None,
        settings: CodeLinkConfig | Mapping[str, Any] | None = None,
        resolver: FenceResolver | None = None,
        **kwargs: Any,
    ) -> None:
        self.config = {
            "root": [".", "Directory linked paths are resolved against."],
            "current_directory": ["", "Directory of the document, relative to 'root'."],
        }
        overrides = {
            key: kwargs.pop(key) for key in list(kwargs) if key in CodeLinkConfig.model_fields
        }
        super().__init__(**kwargs)
        if isinstance(settings, Mapping):
            settings = CodeLinkConfig.model_validate(dict(settings))
        if overrides:
            base = settings.model_dump() if settings is not None else {}
            settings = CodeLinkConfig.model_validate({**base, **overrides})
        self._settings = settings
        self._accessor = accessor
        self._resolver = resolver
        self.emitter: DiagnosticEmitter = emitter or LoggingEmitter()
        self.diagnostics: list[FenceDiagnostic] = []

    @property
    def resolver(self) -> FenceResolver:
        """Return the shared resolver, building it on first use."""
        if self._resolver is None:
            accessor = self._accessor or FileSystemDirectoryAccessor(self.getConfig("root"))
            self._resolver = FenceResolver(accessor, self._settings)
        return self._resolver

    def current_directory_for(self, md: Markdown) -> str | PurePath | None:
        value = getattr(md, "codelink_current_directory", None)
        if value is None:
            value = self.getConfig("current_directory")
        return value or None

    def report(self, entry: FenceDiagnostic) -> None:
        self.diagnostics.append(entry)
        payload = entry.payload()
        self.emitter.event("fence_diagnostic", payload)
        self.emitter.warning(entry.describe())

    def reset(self) -> None:
        """Forget the diagnostics of the previous conversion."""
        self.diagnostics.clear()

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.registerExtension(self)
        md.preprocessors.register(_CodeLinkPreprocessor(md, self), "codelink", priority=27)


def makeExtension(**kwargs: Any) -> CodeLinkExtension:  # noqa: N802 - markdown hook
    """Entry point exposed to Python-Markdown."""
    return CodeLinkExtension(**kwargs)


__all__ = ["CodeLinkExtension", "FenceDiagnostic", "makeExtension"]
