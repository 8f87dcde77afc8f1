"""Precondition errors raised before any subprocess or file mutation."""

from __future__ import annotations


class GdvError(RuntimeError):
    """Base class for validation failures reported with exit code 1."""


class WrapperError(GdvError):
    """The Gradle wrapper script is missing, not a file, or not executable."""


class OutputDirError(GdvError):
    """The collection output directory cannot be used."""


class CorpusDirError(GdvError):
    """The search directory does not exist or is not a directory."""


class ConfigError(GdvError):
    """The configuration file or an override value is invalid."""
