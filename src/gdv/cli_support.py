"""Shared plumbing for the gdv command lines.

Only typer's public names are used here; typer may run on the standalone
click distribution or on its own bundled copy, and the exception classes
differ between the two.
"""

from __future__ import annotations

from collections.abc import Sequence

import typer

from gdv import APP_NAME, __version__

# BadParameter derives from the UsageError of whichever click typer runs on.
UsageError: type[Exception] = typer.BadParameter.__base__


def version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(f"{APP_NAME} {__version__}")
        raise typer.Exit()


def help_option_callback(ctx: typer.Context, value: bool) -> None:
    """Handle eager --help option."""
    if value:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def run_app(app: typer.Typer, *, prog_name: str, usage: str, argv: Sequence[str]) -> int:
    """Invoke ``app`` and map usage errors to exit code 1 instead of 2."""
    args = list(argv)
    # Help wins over every other argument, valid or not.
    if "--help" in args:
        args = ["--help"]
    try:
        rv = app(args=args, prog_name=prog_name, standalone_mode=False)
    except UsageError as exc:
        typer.echo(usage, err=True)
        typer.echo(f"Error: {exc.format_message()}", err=True)
        return 1
    except typer.Abort:
        return 130
    return rv if isinstance(rv, int) else 0
