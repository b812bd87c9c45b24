"""Typer application wiring for the codelink CLI."""

from __future__ import annotations

from rich.traceback import Traceback
import typer

from codelink.adapters.markdown import DEFAULT_MARKDOWN_EXTENSIONS
from codelink.version import get_version

from .commands import publish, render
from .state import configure_logging, debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Render Markdown whose C# fences link to source files for live execution.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def _app_root(
    ctx: typer.Context,
    list_extensions: bool = typer.Option(
        False,
        "--list-extensions",
        help="List Markdown extensions enabled by default and exit.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Print the installed version and exit.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Show full tracebacks when an unexpected error occurs.",
    ),
) -> None:
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    state.clear_events()
    configure_logging(state)

    if version:
        typer.echo(get_version())
        raise typer.Exit(code=0)

    if list_extensions:
        for extension in DEFAULT_MARKDOWN_EXTENSIONS:
            typer.echo(extension)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


app.command(name="render")(render)
app.command(name="publish")(publish)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
