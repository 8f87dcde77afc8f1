"""Run configuration for gdv tools.

Values are resolved once at startup and passed explicitly to every
component. Precedence, lowest to highest:

1. built-in defaults
2. ``gdv.yaml`` in the main project directory
3. ``GDV_*`` environment variables
4. command line options
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from gdv import APP_NAME, __version__
from gdv.errors import ConfigError

CONFIG_FILENAME = "gdv.yaml"

GDV_WRAPPER_ENV = "GDV_WRAPPER"
GDV_INIT_SCRIPT_ENV = "GDV_INIT_SCRIPT"
GDV_GRADLE_ARGS_ENV = "GDV_GRADLE_ARGS"
GDV_QUIET_ENV = "GDV_QUIET"


class TaskListMode(str, Enum):
    """How the task catalog is obtained."""

    INIT_SCRIPT = "init-script"
    ALL = "all"


@dataclass(frozen=True)
class AppConfig:
    """Immutable configuration shared by every pipeline stage."""

    prog_name: str
    app_name: str = APP_NAME
    version: str = __version__
    wrapper_name: str = "gradlew"
    init_script: Path | None = None
    gradle_args: tuple[str, ...] = field(default_factory=tuple)
    task_list_mode: TaskListMode = TaskListMode.INIT_SCRIPT
    quiet: bool = False

    @property
    def version_line(self) -> str:
        return f"{self.app_name} {self.version}"


def _quiet_from_env(env: Mapping[str, str]) -> bool:
    return env.get(GDV_QUIET_ENV, "0").strip() == "1"


def base_config(prog_name: str, *, env: Mapping[str, str] | None = None) -> AppConfig:
    """Configuration that does not depend on a project directory."""
    environ = os.environ if env is None else env
    return AppConfig(prog_name=prog_name, quiet=_quiet_from_env(environ))


def _load_file(project_dir: Path) -> dict[str, Any]:
    path = project_dir / CONFIG_FILENAME
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML config at {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config structure in {path}: top level must be a mapping")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid config structure: '{name}' must be a mapping")
    return value


def _as_args(value: Any, source: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"Invalid gradle arguments in {source}: expected a string or a list of strings")


def _as_task_list_mode(value: Any, source: str) -> TaskListMode:
    try:
        return TaskListMode(str(value))
    except ValueError as e:
        choices = ", ".join(m.value for m in TaskListMode)
        raise ConfigError(f"Unsupported task list mode in {source}: {value}. Expected one of: {choices}.") from e


def load_config(
    base: AppConfig,
    project_dir: Path,
    *,
    env: Mapping[str, str] | None = None,
    task_list_mode: TaskListMode | None = None,
    extra_gradle_args: tuple[str, ...] = (),
) -> AppConfig:
    """Layer the project file, environment and CLI overrides over ``base``."""
    environ = os.environ if env is None else env
    data = _load_file(project_dir)
    gradle = _section(data, "gradle")
    collect = _section(data, "collect")

    config = base
    if "wrapper" in gradle:
        config = replace(config, wrapper_name=str(gradle["wrapper"]))
    if "init_script" in gradle:
        config = replace(config, init_script=(project_dir / str(gradle["init_script"])).resolve())
    if "args" in gradle:
        config = replace(config, gradle_args=_as_args(gradle["args"], CONFIG_FILENAME))
    if "task_list" in collect:
        config = replace(config, task_list_mode=_as_task_list_mode(collect["task_list"], CONFIG_FILENAME))

    if environ.get(GDV_WRAPPER_ENV, "").strip():
        config = replace(config, wrapper_name=environ[GDV_WRAPPER_ENV].strip())
    if environ.get(GDV_INIT_SCRIPT_ENV, "").strip():
        config = replace(config, init_script=Path(environ[GDV_INIT_SCRIPT_ENV].strip()).expanduser().resolve())
    if environ.get(GDV_GRADLE_ARGS_ENV, "").strip():
        config = replace(config, gradle_args=_as_args(environ[GDV_GRADLE_ARGS_ENV], GDV_GRADLE_ARGS_ENV))

    if task_list_mode is not None:
        config = replace(config, task_list_mode=task_list_mode)
    if extra_gradle_args:
        config = replace(config, gradle_args=(*config.gradle_args, *extra_gradle_args))

    if not config.wrapper_name or "/" in config.wrapper_name:
        raise ConfigError(f"Invalid wrapper name: {config.wrapper_name!r}")
    return config
