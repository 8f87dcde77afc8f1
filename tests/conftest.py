"""Pytest configuration and fixtures for gdv tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from gdv.gradle.exec import ExecError, ExecResult


def _property(args: list[str], name: str) -> Path:
    prefix = f"-P{name}="
    for arg in args:
        if arg.startswith(prefix):
            return Path(arg[len(prefix):])
    raise AssertionError(f"missing property {name} in {args}")


class GradleStub:
    """Fake Gradle build with a fixed set of projects and tasks."""

    def __init__(
        self,
        projects: list[str],
        tasks: list[str],
        *,
        reports: dict[str, str] | None = None,
        failing: dict[str, int] | None = None,
        fail_on: str | None = None,
        version_text: str = "Gradle 8.7\n",
    ):
        self.projects = projects
        self.tasks = tasks
        self.reports = reports or {}
        self.failing = failing or {}
        self.fail_on = fail_on
        self.version_text = version_text
        self.calls: list[list[str]] = []

    def _result(self, args: list[str], project_dir: Path, code: int = 0, stdout: str = "") -> ExecResult:
        return ExecResult(argv=tuple(["./gradlew", *args]), cwd=project_dir, returncode=code, stdout=stdout, stderr="")

    def __call__(
        self,
        args: list[str],
        *,
        project_dir: Path,
        wrapper: Path,
        check: bool = True,
        output_path: Path | None = None,
    ) -> ExecResult:
        _ = wrapper
        self.calls.append(list(args))
        task = args[0]

        if task == self.fail_on:
            result = self._result(args, project_dir, code=1, stdout="FAILURE: Build failed")
            if check:
                raise ExecError(result)
            return result

        if task == "--version":
            return self._result(args, project_dir, stdout=self.version_text)
        if task == "projectlist":
            lines = "".join(f"{name} {project_dir}/{name.strip(':')}\n" for name in reversed(self.projects))
            _property(args, "gdv.projectsOutput").write_text(lines, encoding="utf-8")
            return self._result(args, project_dir)
        if task == "tasklist":
            _property(args, "gdv.tasksOutput").write_text("".join(f"{t}\n" for t in self.tasks), encoding="utf-8")
            return self._result(args, project_dir)
        if task == "tasks":
            listing = "".join(f"{t.removeprefix(':')} - Displays something.\n" for t in self.tasks)
            return self._result(args, project_dir, stdout=f"Tasks runnable from root project\n\n{listing}")
        if task == "eachDependencies":
            out_dir = _property(args, "gdv.dependenciesOutput")
            for path, text in self.reports.items():
                name = "root" if path == ":" else path.replace(":", "__")
                (out_dir / f"{name}.txt").write_text(text, encoding="utf-8")
            return self._result(args, project_dir, code=self.failing.get(task, 0))

        assert output_path is not None, f"unexpected captured call: {args}"
        assert check is False
        project = task.removesuffix(":dependencies") or ":"
        code = self.failing.get(task, 0)
        with open(output_path, "x", encoding="utf-8") as f:
            f.write(self.reports.get(project, ""))
        return self._result(args, project_dir, code=code)


@pytest.fixture
def gradle_project(tmp_path: Path) -> Path:
    """Main project directory holding an executable (never run) wrapper."""
    project = tmp_path / "project"
    project.mkdir()
    wrapper = project / "gradlew"
    wrapper.write_text("#!/bin/sh\nexit 99\n", encoding="utf-8")
    wrapper.chmod(0o755)
    return project


@pytest.fixture
def install_gradle(monkeypatch: pytest.MonkeyPatch) -> Callable[..., GradleStub]:
    """Replace the wrapper runner with a ``GradleStub`` built from the given arguments."""

    def _install(*args, **kwargs) -> GradleStub:
        stub = GradleStub(*args, **kwargs)
        monkeypatch.setattr("gdv.gradle.exec.run_gradlew", stub)
        return stub

    return _install
