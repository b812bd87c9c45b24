"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
RENDERING_PANEL = "Rendering"
DIAGNOSTICS_PANEL = "Diagnostics"

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML configuration file (codelink.yml).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

MarkdownExtensionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--enable-extension",
        "-x",
        help="Additional Markdown extensions to enable (comma or space separated).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

DisableMarkdownExtensionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--disable-extension",
        "-d",
        help="Markdown extensions to disable (comma or space separated).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Exit with status 1 when any code link fence produced a diagnostic.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
