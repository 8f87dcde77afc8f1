"""Collection pipeline: enumerate projects and tasks, then store one report per project."""

from __future__ import annotations

import signal
import tempfile
import threading
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from importlib.resources import as_file, files
from pathlib import Path

from gdv.config import AppConfig
from gdv.errors import ConfigError
from gdv.gradle.enumerate import (
    DEPENDENCIES_OUTPUT_PROPERTY,
    EACH_DEPENDENCIES_TASK,
    GradleSession,
    TaskCatalog,
    gradle_version,
    is_sub_project,
    list_projects,
    list_tasks,
)
from gdv.gradle.guards import ensure_empty_output_dir, resolve_wrapper
from gdv.gradle.naming import absolute_task_path, dependency_task_name, display_name, report_filename
from gdv.gradle.types import CollectionLayout, CollectResult, ProjectFailure
from gdv.ui import echo_info, echo_warn

INIT_SCRIPT_RESOURCE = "init.gradle"

_TERMINATING_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None)) if sig is not None
)


@contextmanager
def terminate_as_exit() -> Iterator[None]:
    """Turn termination signals into SystemExit so cleanup blocks unwind normally."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _raise_exit(signum: int, _frame: object) -> None:
        raise SystemExit(128 + signum)

    previous = {sig: signal.signal(sig, _raise_exit) for sig in _TERMINATING_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _init_script(config: AppConfig, stack: ExitStack) -> Path:
    if config.init_script is not None:
        if not config.init_script.is_file():
            raise ConfigError(f"Init script not found: {config.init_script}")
        return config.init_script
    resource = files("gdv") / "resources" / INIT_SCRIPT_RESOURCE
    return stack.enter_context(as_file(resource))


def prepare_output_dir(layout: CollectionLayout) -> None:
    """Create the output directory and its reports child, in that order."""
    layout.output_dir.mkdir(parents=True, exist_ok=True)
    layout.dependencies_dir.mkdir()


def write_versions(session: GradleSession, layout: CollectionLayout) -> None:
    """Record gdv and Gradle versions before any dependency task runs."""
    with open(layout.self_version_path, "x", encoding="utf-8") as f:
        f.write(f"{session.config.version}\n")
    version_text = gradle_version(session)
    with open(layout.gradle_version_path, "x", encoding="utf-8") as f:
        f.write(version_text)


def _collect_each(
    session: GradleSession,
    layout: CollectionLayout,
    projects: tuple[str, ...],
    catalog: TaskCatalog,
) -> CollectResult:
    config = session.config
    collected: list[str] = []
    skipped: list[str] = []
    failed: list[ProjectFailure] = []

    for project in projects:
        task_name = dependency_task_name(project)

        # A build file alone is not enough; the project must expose the task.
        if task_name not in catalog:
            if not project:
                echo_info(config, f"'{task_name}' is skipped; the root project doesn't have a task 'dependencies'.")
            else:
                echo_info(
                    config,
                    f"'{task_name}' is skipped; the project '{project}' doesn't have a task 'dependencies'.",
                )
            skipped.append(project)
            continue

        report_path = layout.dependencies_dir / report_filename(project)
        echo_info(config, f"Running '{task_name}'")
        try:
            result = session.run([absolute_task_path(task_name)], check=False, output_path=report_path)
        except OSError as exc:
            echo_warn(config, f"'{task_name}' was not run; cannot write {report_path}: {exc.strerror or exc}")
            failed.append(ProjectFailure(project=project, returncode=-1, report_path=report_path))
            continue
        collected.append(project)
        if result.returncode != 0:
            echo_warn(
                config,
                f"'{task_name}' failed with exit code {result.returncode}; its output is kept in {report_path}",
            )
            failed.append(ProjectFailure(project=project, returncode=result.returncode, report_path=report_path))

    return CollectResult(layout=layout, collected=tuple(collected), skipped=tuple(skipped), failed=tuple(failed))


def _collect_batch(session: GradleSession, layout: CollectionLayout, projects: tuple[str, ...]) -> CollectResult:
    config = session.config
    echo_info(config, f"Running '{EACH_DEPENDENCIES_TASK}'")
    result = session.run(
        [EACH_DEPENDENCIES_TASK, f"-P{DEPENDENCIES_OUTPUT_PROPERTY}={layout.dependencies_dir}"],
        check=False,
        with_init_script=True,
    )

    collected: list[str] = []
    skipped: list[str] = []
    for project in projects:
        if (layout.dependencies_dir / report_filename(project)).exists():
            collected.append(project)
        else:
            skipped.append(project)

    for path in sorted(layout.dependencies_dir.iterdir()):
        name = "" if path.stem == "root" else path.stem.replace("__", ":")
        if name and not is_sub_project(name, projects):
            echo_warn(config, f"{path.name} does not belong to any listed project")

    failed: tuple[ProjectFailure, ...] = ()
    if result.returncode != 0:
        detail = (result.stderr or result.stdout).strip().splitlines()[-5:]
        echo_warn(
            config,
            f"'{EACH_DEPENDENCIES_TASK}' failed with exit code {result.returncode}; reports may be incomplete",
        )
        for line in detail:
            echo_warn(config, line)
        failed = (
            ProjectFailure(project=EACH_DEPENDENCIES_TASK, returncode=result.returncode, report_path=layout.dependencies_dir),
        )

    return CollectResult(layout=layout, collected=tuple(collected), skipped=tuple(skipped), failed=failed)


def collect_dependencies(
    config: AppConfig,
    *,
    project_dir: Path,
    output_dir: Path,
    batch: bool = False,
) -> CollectResult:
    """Run the full collection pipeline into an empty or missing ``output_dir``.

    Validation happens before any subprocess runs or any file is written.
    Enumeration failures raise ``ExecError``; a failing dependency task is
    recorded in the result and collection continues with the next project.
    """
    ensure_empty_output_dir(output_dir)
    wrapper = resolve_wrapper(project_dir, config.wrapper_name)
    layout = CollectionLayout.for_output_dir(output_dir)

    with ExitStack() as stack:
        stack.enter_context(terminate_as_exit())
        work_dir = Path(stack.enter_context(tempfile.TemporaryDirectory(prefix="gdv-")))
        session = GradleSession(
            config=config,
            project_dir=project_dir,
            wrapper=wrapper,
            init_script=_init_script(config, stack),
        )

        prepare_output_dir(layout)
        write_versions(session, layout)

        echo_info(config, "Loading project list")
        projects = list_projects(session, work_dir)

        if batch:
            return _collect_batch(session, layout, projects)

        echo_info(config, "Loading task list")
        catalog = list_tasks(session, work_dir)
        return _collect_each(session, layout, projects, catalog)


def summarize(result: CollectResult) -> str:
    line = (
        f"Collected {len(result.collected)} project(s), skipped {len(result.skipped)}, "
        f"failed {len(result.failed)} into {result.layout.output_dir}"
    )
    if result.failed:
        names = ", ".join(display_name(f.project) for f in result.failed)
        line += f" (failed: {names})"
    return line
