"""Markdown conversion utilities wiring the code link extension into Python-Markdown."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import PurePath
import re
from typing import Any

import markdown
import yaml

from codelink.core.config import CodeLinkConfig
from codelink.core.diagnostics import DiagnosticEmitter
from codelink.core.filesystem import DirectoryAccessor, FileSystemDirectoryAccessor
from codelink.core.resolver import FenceResolver
from codelink.extensions.codelink import CodeLinkExtension, FenceDiagnostic


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "MarkdownDocument",
    "build_markdown",
    "normalize_markdown_extensions",
    "render_markdown",
    "resolve_markdown_extensions",
    "split_front_matter",
]


DEFAULT_MARKDOWN_EXTENSIONS = [
    "abbr",
    "admonition",
    "attr_list",
    "def_list",
    "footnotes",
    "md_in_html",
    "tables",
    "toc",
    "pymdownx.highlight",
    "pymdownx.superfences",
    "pymdownx.mark",
    "pymdownx.tasklist",
    "pymdownx.tilde",
]


DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, object]] = {
    "pymdownx.highlight": {
        "use_pygments": False,
    },
}


class MarkdownConversionError(Exception):
    """Raised when Markdown cannot be converted into HTML."""


@dataclass(slots=True)
class MarkdownDocument:
    """Result of converting Markdown into HTML."""

    html: str
    front_matter: dict[str, Any]
    diagnostics: list[FenceDiagnostic] = field(default_factory=list)


def resolve_markdown_extensions(
    requested: Iterable[str] | None,
    disabled: Iterable[str] | None,
) -> list[str]:
    """Return the active Markdown extension list after applying overrides."""
    enabled = normalize_markdown_extensions(requested)
    disabled_normalized = {
        extension.lower() for extension in normalize_markdown_extensions(disabled)
    }

    combined: list[str] = []
    seen: set[str] = set()
    for extension in [*DEFAULT_MARKDOWN_EXTENSIONS, *enabled]:
        key = extension.lower()
        if key in seen or key in disabled_normalized:
            continue
        seen.add(key)
        combined.append(extension)
    return combined


def normalize_markdown_extensions(
    values: Iterable[str] | str | None,
) -> list[str]:
    """Normalise extension names from CLI-friendly strings into a flat list."""
    if values is None:
        return []

    candidates: Iterable[str] = [values] if isinstance(values, str) else values

    normalized: list[str] = []
    for value in candidates:
        if not isinstance(value, str):
            continue
        chunks = re.split(r"[,\s\x00]+", value)
        normalized.extend(chunk for chunk in chunks if chunk)
    return normalized


def build_markdown(
    *,
    resolver: FenceResolver,
    extensions: Sequence[str] | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[markdown.Markdown, CodeLinkExtension]:
    """Create a Markdown processor with the code link extension registered first."""
    active_extensions = list(DEFAULT_MARKDOWN_EXTENSIONS if extensions is None else extensions)
    extension_configs = {
        name: dict(DEFAULT_EXTENSION_CONFIGS[name])
        for name in active_extensions
        if name in DEFAULT_EXTENSION_CONFIGS
    }
    codelink = CodeLinkExtension(resolver=resolver, emitter=emitter)
    try:
        processor = markdown.Markdown(
            extensions=[codelink, *active_extensions],
            extension_configs=extension_configs,
        )
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to initialize Markdown processor: {exc}") from exc
    return processor, codelink


def render_markdown(
    source: str,
    *,
    accessor: DirectoryAccessor | None = None,
    root: str | PurePath | None = None,
    current_directory: str | PurePath | None = None,
    extensions: Sequence[str] | None = None,
    settings: CodeLinkConfig | None = None,
    resolver: FenceResolver | None = None,
    emitter: DiagnosticEmitter | None = None,
    document: str | None = None,
) -> MarkdownDocument:
    """Convert Markdown source into HTML while collecting front matter and fence diagnostics.

    Linked files resolve through ``resolver`` when given, else through
    ``accessor`` (defaulting to the file system under ``root``).
    ``current_directory`` is the document's directory relative to the root.
    """
    if resolver is None:
        if accessor is None:
            accessor = FileSystemDirectoryAccessor(root if root is not None else ".")
        resolver = FenceResolver(accessor, settings)

    metadata, markdown_body = split_front_matter(source)
    processor, codelink = build_markdown(
        resolver=resolver, extensions=extensions, emitter=emitter
    )
    processor.codelink_current_directory = current_directory
    processor.codelink_document = document

    try:
        html = processor.convert(markdown_body)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc

    return MarkdownDocument(
        html=html, front_matter=metadata, diagnostics=list(codelink.diagnostics)
    )


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from Markdown content, returning metadata and body.

    Malformed or non-mapping front matter leaves the source untouched.
    """
    candidate = source.lstrip("\ufeff")
    lines = candidate.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, source

    closing_index: int | None = None
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() in {"---", "..."}:
            closing_index = idx
            break
    if closing_index is None:
        return {}, source

    try:
        metadata = yaml.safe_load("\n".join(lines[1:closing_index])) or {}
    except yaml.YAMLError:
        return {}, source
    if not isinstance(metadata, dict):
        return {}, source

    body = "\n".join(lines[closing_index + 1 :])
    if source.endswith("\n"):
        body += "\n"
    return metadata, body
