"""Types for gdv collection runs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEPENDENCIES_DIRNAME = "dependencies"
SELF_VERSION_FILENAME = "gdv-version.txt"
GRADLE_VERSION_FILENAME = "gradle-version.txt"


@dataclass(frozen=True)
class CollectionLayout:
    """Deterministic file addresses inside a collection output directory."""

    output_dir: Path
    dependencies_dir: Path
    self_version_path: Path
    gradle_version_path: Path

    @classmethod
    def for_output_dir(cls, output_dir: Path) -> CollectionLayout:
        return cls(
            output_dir=output_dir,
            dependencies_dir=output_dir / DEPENDENCIES_DIRNAME,
            self_version_path=output_dir / SELF_VERSION_FILENAME,
            gradle_version_path=output_dir / GRADLE_VERSION_FILENAME,
        )


@dataclass(frozen=True)
class ProjectFailure:
    """A project whose dependency task exited non-zero."""

    project: str
    returncode: int
    report_path: Path


@dataclass(frozen=True)
class CollectResult:
    """Collection outcome."""

    layout: CollectionLayout
    collected: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    failed: tuple[ProjectFailure, ...] = ()
