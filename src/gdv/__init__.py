"""Gradle Dependence Viewer - collect and search Gradle dependency reports."""

__version__ = "0.3.0"

APP_NAME = "Gradle Dependence Viewer"
