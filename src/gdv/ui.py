"""Status output on stderr.

Standard output is reserved for primary results (search matches, help,
version), so every diagnostic goes through ``err_console``.
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from gdv.config import AppConfig

err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def _emit(config: AppConfig, message: str, style: str | None = None) -> None:
    line = Text(f"{config.prog_name}: ")
    line.append(message, style=style)
    err_console.print(line)


def echo_info(config: AppConfig, message: str) -> None:
    if config.quiet:
        return
    _emit(config, message)


def echo_warn(config: AppConfig, message: str) -> None:
    _emit(config, message, style="yellow")


def echo_err(config: AppConfig, message: str) -> None:
    _emit(config, message, style="bold red")
