"""Fail-closed guards run before any subprocess or file mutation."""

from __future__ import annotations

import os
from pathlib import Path

from gdv.errors import CorpusDirError, OutputDirError, WrapperError


def resolve_user_path(value: Path, *, base: Path | None = None) -> Path:
    """Resolve a user-supplied path against the directory gdv started in."""
    path = value.expanduser()
    if not path.is_absolute():
        path = (base or Path.cwd()) / path
    return path.resolve()


def resolve_wrapper(project_dir: Path, wrapper_name: str = "gradlew") -> Path:
    """Locate the wrapper script and require it to be an executable regular file."""
    if not project_dir.is_dir():
        raise WrapperError(f"Not directory: {project_dir}")

    wrapper = project_dir / wrapper_name
    if not wrapper.exists():
        raise WrapperError(f"Gradle wrapper not found: {wrapper}")
    if not wrapper.is_file():
        raise WrapperError(f"Gradle wrapper is not a regular file: {wrapper}")
    if not os.access(wrapper, os.X_OK):
        raise WrapperError(f"Gradle wrapper is not executable: {wrapper}")
    return wrapper


def ensure_empty_output_dir(output_dir: Path) -> None:
    """Require the output directory to be nonexistent or an empty directory."""
    if not output_dir.exists():
        return
    if not output_dir.is_dir():
        raise OutputDirError(f"Output destination exists and is not a directory: {output_dir}")
    if any(output_dir.iterdir()):
        raise OutputDirError(f"Output directory is not empty: {output_dir}")


def ensure_corpus_dir(corpus_dir: Path) -> None:
    """Require the search target to be an existing directory."""
    if not corpus_dir.is_dir():
        raise CorpusDirError(f"Not directory: {corpus_dir}")
