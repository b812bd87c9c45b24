"""CLI command implementations exposed via `codelink.ui.cli`."""

from __future__ import annotations

from .publish import publish
from .render import render


__all__ = ["publish", "render"]
