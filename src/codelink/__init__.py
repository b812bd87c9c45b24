"""Markdown fences that link code blocks to source files for live execution."""

from __future__ import annotations

from codelink.adapters.markdown import MarkdownDocument, render_markdown
from codelink.core import (
    CodeLinkConfig,
    Diagnostic,
    DiagnosticKind,
    DirectoryAccessor,
    FenceInfo,
    FenceResolver,
    FileSystemDirectoryAccessor,
    InMemoryDirectoryAccessor,
    PublishConfig,
    ResolvedCodeLink,
    extract_region,
    load_config,
    parse_fence_info,
)
from codelink.extensions.codelink import CodeLinkExtension, FenceDiagnostic, makeExtension
from codelink.publish import PublishReport, publish_directory
from codelink.version import get_version


__version__ = get_version()

__all__ = [
    "CodeLinkConfig",
    "CodeLinkExtension",
    "Diagnostic",
    "DiagnosticKind",
    "DirectoryAccessor",
    "FenceDiagnostic",
    "FenceInfo",
    "FenceResolver",
    "FileSystemDirectoryAccessor",
    "InMemoryDirectoryAccessor",
    "MarkdownDocument",
    "PublishConfig",
    "PublishReport",
    "ResolvedCodeLink",
    "__version__",
    "extract_region",
    "load_config",
    "makeExtension",
    "parse_fence_info",
    "publish_directory",
    "render_markdown",
]
