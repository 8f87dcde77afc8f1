"""Gradle wrapper invocation and naming helpers."""

from gdv.gradle.exec import ExecError, ExecResult, run_gradlew
from gdv.gradle.naming import dependency_task_name, normalize_project_name, report_filename

__all__ = [
    "ExecError",
    "ExecResult",
    "dependency_task_name",
    "normalize_project_name",
    "report_filename",
    "run_gradlew",
]
