"""Implementation of the ``codelink publish`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.table import Table
import typer

from codelink.core.config import PublishConfig, load_config
from codelink.core.exceptions import CodeLinkError, describe_exception
from codelink.publish import publish_directory

from .._options import DIAGNOSTICS_PANEL, ConfigOption, StrictOption
from ..diagnostics import PAGE_WRITTEN_EVENT, CliEmitter, fence_diagnostic_rows
from ..state import emit_error, get_cli_state


def publish(
    ctx: typer.Context,
    source: Annotated[
        Path,
        typer.Argument(
            help="Directory holding the Markdown documents and linked sources.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path,
        typer.Argument(
            help="Destination directory of the rendered site.",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ],
    jobs: Annotated[
        int | None,
        typer.Option(
            "--jobs",
            "-j",
            min=1,
            help="Number of documents rendered concurrently.",
        ),
    ] = None,
    no_assets: Annotated[
        bool,
        typer.Option(
            "--no-assets",
            help="Do not copy non-Markdown files into the output directory.",
        ),
    ] = False,
    template_dir: Annotated[
        Path | None,
        typer.Option(
            "--template-dir",
            help="Directory holding a page.html Jinja2 template overriding the bundled one.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    config_path: ConfigOption = None,
    summary: Annotated[
        bool,
        typer.Option(
            "--summary/--no-summary",
            help="Print a table of the fence diagnostics found.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = True,
    strict: StrictOption = False,
) -> None:
    """Render every Markdown document of SOURCE into OUTPUT."""
    state = get_cli_state(ctx)
    try:
        config = load_config(config_path) if config_path else PublishConfig()
        updates: dict[str, object] = {"source_dir": source, "output_dir": output}
        if jobs is not None:
            updates["jobs"] = jobs
        if no_assets:
            updates["copy_assets"] = False
        if template_dir is not None:
            updates["template_dir"] = template_dir
        config = config.model_copy(update=updates)
        report = publish_directory(config, emitter=CliEmitter(state))
    except CodeLinkError as exc:
        emit_error(describe_exception(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    pages = state.consume_events(PAGE_WRITTEN_EVENT)
    rows = fence_diagnostic_rows(state)
    if summary:
        _present_summary(state.console, len(pages), len(report.assets), rows)

    if strict and rows:
        raise typer.Exit(code=1)


def _present_summary(
    console: Console, pages: int, assets: int, rows: list[tuple[str, int, str, str]]
) -> None:
    console.print(f"Published {pages} page(s), copied {assets} asset(s).")
    if not rows:
        return

    table = Table(title="Code link diagnostics")
    table.add_column("Document")
    table.add_column("Line", justify="right")
    table.add_column("Kind")
    table.add_column("Message")
    for document, line, kind, message in rows:
        table.add_row(document, str(line), kind, message)
    console.print(table)


__all__ = ["publish"]
