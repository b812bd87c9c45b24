"""Implementation of the ``codelink render`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from codelink.adapters.markdown import (
    MarkdownConversionError,
    render_markdown,
    resolve_markdown_extensions,
)
from codelink.core.config import PublishConfig, load_config
from codelink.core.exceptions import CodeLinkError, describe_exception

from .._options import (
    INPUTS_PANEL,
    OUTPUT_PANEL,
    ConfigOption,
    DisableMarkdownExtensionsOption,
    MarkdownExtensionsOption,
    StrictOption,
)
from ..diagnostics import CliEmitter, fence_diagnostic_rows
from ..state import emit_error, get_cli_state, render_message


def render(
    ctx: typer.Context,
    input_path: Annotated[
        Path,
        typer.Argument(
            metavar="INPUT",
            help="Markdown document to render.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Directory linked files are resolved against (defaults to the document's).",
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            rich_help_panel=INPUTS_PANEL,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the HTML to this file instead of standard output.",
            dir_okay=False,
            resolve_path=True,
            rich_help_panel=OUTPUT_PANEL,
        ),
    ] = None,
    config_path: ConfigOption = None,
    enable_extensions: MarkdownExtensionsOption = None,
    disable_extensions: DisableMarkdownExtensionsOption = None,
    strict: StrictOption = False,
) -> None:
    """Render one Markdown document, resolving its code link fences."""
    state = get_cli_state(ctx)
    root_dir = root or input_path.parent
    try:
        relative = input_path.relative_to(root_dir)
    except ValueError as exc:
        raise typer.BadParameter(
            f"'{input_path}' is not inside the root directory '{root_dir}'.",
            param_hint="--root",
        ) from exc

    try:
        config = load_config(config_path) if config_path else PublishConfig()
        extensions = resolve_markdown_extensions(
            [*config.markdown_extensions, *(enable_extensions or [])],
            disable_extensions,
        )
        document = render_markdown(
            input_path.read_text(encoding="utf-8"),
            root=root_dir,
            current_directory=relative.parent.as_posix(),
            extensions=extensions,
            settings=config.codelink,
            emitter=CliEmitter(state),
            document=relative.as_posix(),
        )
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(document.html, encoding="utf-8")
    except (CodeLinkError, MarkdownConversionError, OSError, UnicodeDecodeError) as exc:
        emit_error(describe_exception(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(document.html)
    else:
        render_message("info", f"Wrote {output}")

    if fence_diagnostic_rows(state) and strict:
        raise typer.Exit(code=1)


__all__ = ["render"]
