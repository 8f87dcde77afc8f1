"""Deterministic naming helpers for Gradle project paths and report files."""

from __future__ import annotations

ROOT_DISPLAY_NAME = "root"
DEPENDENCIES_TASK = "dependencies"
REPORT_SUFFIX = ".txt"


def normalize_project_name(value: str) -> str:
    """Map Gradle's root path ``:`` to the canonical empty project name."""
    name = value.strip()
    return "" if name == ":" else name


def display_name(project: str) -> str:
    return project or ROOT_DISPLAY_NAME


def report_filename(project: str) -> str:
    """Build the filesystem-safe report file name for a project."""
    escaped = project.replace(":", "__")
    return f"{escaped or ROOT_DISPLAY_NAME}{REPORT_SUFFIX}"


def dependency_task_name(project: str) -> str:
    """Build the dependency-report task name; the root uses the bare task."""
    if not project:
        return DEPENDENCIES_TASK
    return f"{project}:{DEPENDENCIES_TASK}"


def absolute_task_path(task_name: str) -> str:
    """Make a task name absolute so Gradle does not fan it out to every project."""
    return task_name if task_name.startswith(":") else f":{task_name}"


def catalog_key(task_name: str) -> str:
    """Comparison key for task catalog membership (one leading colon dropped)."""
    return task_name.removeprefix(":")
