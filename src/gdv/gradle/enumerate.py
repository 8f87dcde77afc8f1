"""Project and task enumeration through the Gradle wrapper."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gdv.config import AppConfig, TaskListMode
from gdv.gradle import exec as gradle_exec
from gdv.gradle.naming import catalog_key, normalize_project_name

PROJECTS_OUTPUT_PROPERTY = "gdv.projectsOutput"
TASKS_OUTPUT_PROPERTY = "gdv.tasksOutput"
DEPENDENCIES_OUTPUT_PROPERTY = "gdv.dependenciesOutput"

PROJECT_LIST_TASK = "projectlist"
TASK_LIST_TASK = "tasklist"
EACH_DEPENDENCIES_TASK = "eachDependencies"


@dataclass(frozen=True)
class GradleSession:
    """Everything needed to invoke the wrapper for one main project."""

    config: AppConfig
    project_dir: Path
    wrapper: Path
    init_script: Path

    def run(
        self,
        args: list[str],
        *,
        check: bool = True,
        output_path: Path | None = None,
        with_init_script: bool = False,
    ) -> gradle_exec.ExecResult:
        argv = list(args)
        if with_init_script:
            argv += ["--init-script", str(self.init_script)]
        argv += list(self.config.gradle_args)
        return gradle_exec.run_gradlew(
            argv,
            project_dir=self.project_dir,
            wrapper=self.wrapper,
            check=check,
            output_path=output_path,
        )


def parse_project_list(text: str) -> tuple[str, ...]:
    """Parse ``<path> <dir>`` rows into a sorted, duplicate-free ProjectList."""
    names: set[str] = set()
    for raw_line in text.splitlines():
        fields = raw_line.split()
        if not fields:
            continue
        names.add(normalize_project_name(fields[0]))
    return tuple(sorted(names))


def parse_task_catalog(text: str) -> frozenset[str]:
    """Take the first column of every line as a task name."""
    tasks: set[str] = set()
    for raw_line in text.splitlines():
        fields = raw_line.split()
        if fields:
            tasks.add(catalog_key(fields[0]))
    return frozenset(tasks)


def _read_artifact(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise RuntimeError(f"Failed to reference the temporary file created: {path}") from e


def list_projects(session: GradleSession, work_dir: Path) -> tuple[str, ...]:
    """Run the init script's project listing task; failure is fatal."""
    output = work_dir / "projects.txt"
    session.run(
        [PROJECT_LIST_TASK, f"-P{PROJECTS_OUTPUT_PROPERTY}={output}"],
        with_init_script=True,
    )
    projects = parse_project_list(_read_artifact(output))
    output.write_text("".join(f"{name or ':'}\n" for name in projects), encoding="utf-8")
    return projects


class TaskCatalog:
    """Task names available in the build, backed by a flat text artifact.

    Lookups re-read the artifact so a vanished file surfaces as an error
    instead of being mistaken for an absent task.
    """

    def __init__(self, path: Path):
        self.path = path

    def __contains__(self, task_name: object) -> bool:
        if not isinstance(task_name, str):
            return False
        return catalog_key(task_name) in parse_task_catalog(_read_artifact(self.path))


def list_tasks(session: GradleSession, work_dir: Path) -> TaskCatalog:
    """Build the task catalog with the configured strategy; failure is fatal."""
    output = work_dir / "tasks.txt"
    if session.config.task_list_mode is TaskListMode.ALL:
        result = session.run(["tasks", "--all"])
        output.write_text(result.stdout, encoding="utf-8")
    else:
        session.run(
            [TASK_LIST_TASK, f"-P{TASKS_OUTPUT_PROPERTY}={output}"],
            with_init_script=True,
        )
    return TaskCatalog(output)


def is_sub_project(name: str, projects: tuple[str, ...]) -> bool:
    """The root is never a sub-project; other names must be in the list."""
    normalized = normalize_project_name(name)
    if not normalized:
        return False
    key = normalized if normalized.startswith(":") else f":{normalized}"
    return key in projects


def gradle_version(session: GradleSession) -> str:
    return session.run(["--version"]).stdout
