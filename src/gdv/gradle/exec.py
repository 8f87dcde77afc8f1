"""Command runners for the Gradle wrapper."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

_DETAIL_TAIL_LINES = 20


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str


class ExecError(RuntimeError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        tail = "\n".join(detail.splitlines()[-_DETAIL_TAIL_LINES:])
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{tail}".rstrip())
        self.result = result


def run_command(
    argv: list[str],
    *,
    cwd: Path,
    check: bool = True,
    output_path: Path | None = None,
) -> ExecResult:
    """Run command with stdin closed and return structured result.

    When ``output_path`` is given, stdout and stderr are merged into that
    file (created exclusively) instead of being captured.
    """
    if output_path is None:
        completed = subprocess.run(
            argv,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
        stdout, stderr = completed.stdout, completed.stderr
    else:
        with open(output_path, "xb") as sink:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=sink,
                stderr=subprocess.STDOUT,
                check=False,
            )
        stdout, stderr = "", ""

    result = ExecResult(
        argv=tuple(argv),
        cwd=cwd.resolve(),
        returncode=completed.returncode,
        stdout=stdout,
        stderr=stderr,
    )
    if check and result.returncode != 0:
        raise ExecError(result)
    return result


def run_gradlew(
    args: list[str],
    *,
    project_dir: Path,
    wrapper: Path,
    check: bool = True,
    output_path: Path | None = None,
) -> ExecResult:
    """Run the Gradle wrapper rooted at the main project directory."""
    return run_command([str(wrapper), *args], cwd=project_dir, check=check, output_path=output_path)
