"""CLI surface for the search pipeline (``grep-deps``)."""

from __future__ import annotations

import re
import sys
from pathlib import Path

import typer

from gdv.cli_support import UsageError, help_option_callback, run_app, version_option_callback
from gdv.config import base_config
from gdv.errors import GdvError
from gdv.gradle.guards import resolve_user_path
from gdv.search import search_dependencies
from gdv.ui import echo_err

PROG_NAME = "grep-deps"
USAGE = f"Usage: {PROG_NAME} -d <dependencies_directory> <keywords> [...]"

app = typer.Typer(
    name=PROG_NAME,
    add_completion=False,
    add_help_option=False,
)


@app.command()
def search(
    keywords: list[str] | None = typer.Argument(
        None,
        metavar="KEYWORDS...",
        help=(
            "(Required) The keywords which you are looking for. If more than one is "
            "specified, dependencies containing one or more of them are extracted."
        ),
        show_default=False,
    ),
    dependencies_dirs: list[Path] | None = typer.Option(
        None,
        "-d",
        metavar="DEPENDENCIES_DIRECTORY",
        help="(Required) Path of the directory where the dependence trees have been output.",
        show_default=False,
    ),
    regexp: bool = typer.Option(
        False,
        "--regexp",
        "-E",
        help="Treat keywords as regular expressions instead of literal text.",
    ),
    help: bool = typer.Option(
        False,
        "--help",
        help="Show this message and exit.",
        is_eager=True,
        callback=help_option_callback,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        is_eager=True,
        callback=version_option_callback,
    ),
) -> None:
    """Print the sorted, unique dependencies whose lines contain any keyword."""
    _ = (help, version)
    if not keywords:
        raise UsageError("at least one keyword is required")
    if not dependencies_dirs or len(dependencies_dirs) != 1:
        raise UsageError("-d <dependencies_directory> must be given exactly once")

    config = base_config(PROG_NAME)
    corpus_dir = resolve_user_path(dependencies_dirs[0])

    try:
        identifiers = search_dependencies(corpus_dir, keywords, regexp=regexp)
    except re.error as exc:
        raise typer.BadParameter(f"invalid pattern: {exc}", param_hint="KEYWORDS") from exc
    except GdvError as exc:
        echo_err(config, str(exc))
        raise typer.Exit(1) from exc

    for identifier in identifiers:
        typer.echo(identifier)


def run(argv: list[str]) -> int:
    return run_app(app, prog_name=PROG_NAME, usage=USAGE, argv=argv)


def main() -> None:
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
