"""Fence parsing, resolution and diagnostics independent of any Markdown library."""

from __future__ import annotations

from .arguments import Directives, FenceInfo, parse_fence_info
from .config import CodeLinkConfig, PublishConfig, load_config
from .diagnostics import Diagnostic, DiagnosticEmitter, DiagnosticKind, LoggingEmitter, NullEmitter
from .exceptions import CodeLinkError, ConfigurationError, PublishError
from .filesystem import DirectoryAccessor, FileSystemDirectoryAccessor, InMemoryDirectoryAccessor
from .regions import AmbiguousRegion, RegionNotFound, RegionSpan, extract_region
from .resolver import FenceResolver, ResolvedCodeLink


__all__ = [
    "AmbiguousRegion",
    "CodeLinkConfig",
    "CodeLinkError",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticEmitter",
    "DiagnosticKind",
    "DirectoryAccessor",
    "Directives",
    "FenceInfo",
    "FenceResolver",
    "FileSystemDirectoryAccessor",
    "InMemoryDirectoryAccessor",
    "LoggingEmitter",
    "NullEmitter",
    "PublishConfig",
    "PublishError",
    "RegionNotFound",
    "RegionSpan",
    "ResolvedCodeLink",
    "extract_region",
    "load_config",
    "parse_fence_info",
]
