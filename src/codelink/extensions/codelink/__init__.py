"""Public entry points for the code link Markdown extension."""

from __future__ import annotations

from .blocks import FenceBlock, FenceState, LineAction
from .markdown import CodeLinkExtension, FenceDiagnostic, makeExtension
from .renderer import render_block, render_diagnostic, render_link


__all__ = [
    "CodeLinkExtension",
    "FenceBlock",
    "FenceDiagnostic",
    "FenceState",
    "LineAction",
    "makeExtension",
    "render_block",
    "render_diagnostic",
    "render_link",
]
