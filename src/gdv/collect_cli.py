"""CLI surface for the collection pipeline (``collect-deps``)."""

from __future__ import annotations

import sys
from pathlib import Path

import typer

from gdv.cli_support import UsageError, help_option_callback, run_app, version_option_callback
from gdv.collect import collect_dependencies, summarize
from gdv.config import TaskListMode, base_config, load_config
from gdv.errors import GdvError
from gdv.gradle.exec import ExecError
from gdv.gradle.guards import resolve_user_path
from gdv.ui import echo_err, echo_info

PROG_NAME = "collect-deps"
USAGE = f"Usage: {PROG_NAME} -d <output_directory> <main_project_directory>"

app = typer.Typer(
    name=PROG_NAME,
    add_completion=False,
    add_help_option=False,
)


@app.command()
def collect(
    main_project_dir: Path = typer.Argument(
        ...,
        metavar="MAIN_PROJECT_DIRECTORY",
        help="(Required) Path of the root directory of the gradle project.",
        show_default=False,
    ),
    output_dirs: list[Path] | None = typer.Option(
        None,
        "-d",
        metavar="OUTPUT_DIRECTORY",
        help="(Required) Path of the directory where the results will be output.",
        show_default=False,
    ),
    task_list: TaskListMode | None = typer.Option(
        None,
        "--task-list",
        help="How to list tasks: 'init-script' (every sub-project) or 'all' (gradlew tasks --all).",
        case_sensitive=False,
        show_default=False,
    ),
    batch: bool = typer.Option(
        False,
        "--batch",
        help="Collect every report with a single 'eachDependencies' invocation.",
    ),
    gradle_args: list[str] | None = typer.Option(
        None,
        "--gradle-arg",
        help="Extra argument passed to every gradlew invocation (repeatable).",
        show_default=False,
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
    """Run the dependencies task of every sub-project and store each report."""
    _ = (help, version)
    if not output_dirs or len(output_dirs) != 1:
        raise UsageError("-d <output_directory> must be given exactly once")

    base = base_config(PROG_NAME)
    project_dir = resolve_user_path(main_project_dir)
    output_dir = resolve_user_path(output_dirs[0])

    try:
        config = load_config(
            base,
            project_dir,
            task_list_mode=task_list,
            extra_gradle_args=tuple(gradle_args or ()),
        )
        result = collect_dependencies(config, project_dir=project_dir, output_dir=output_dir, batch=batch)
    except GdvError as exc:
        echo_err(base, str(exc))
        raise typer.Exit(1) from exc
    except ExecError as exc:
        echo_err(base, str(exc))
        raise typer.Exit(exc.result.returncode if exc.result.returncode > 0 else 1) from exc
    except (RuntimeError, OSError) as exc:
        echo_err(base, str(exc))
        raise typer.Exit(1) from exc

    echo_info(config, summarize(result))


def run(argv: list[str]) -> int:
    return run_app(app, prog_name=PROG_NAME, usage=USAGE, argv=argv)


def main() -> None:
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
