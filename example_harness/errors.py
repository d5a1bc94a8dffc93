"""Exceptions shared across the example harness."""

from __future__ import annotations


class HarnessError(Exception):
    """Base class for errors raised by the example harness."""


class CatalogError(HarnessError):
    """Raised when the example catalog cannot be read."""


class CatalogShapeError(CatalogError):
    """Raised when the composable app registry is missing a required group."""

    def __init__(self, language: str, message: str) -> None:
        self.language = language
        super().__init__(f"Composable app examples for '{language}': {message}")


class InstantiationError(HarnessError):
    """Raised when an example template cannot be rendered into its target."""


class InvalidFilterError(HarnessError):
    """Raised when the example filter is not a valid regular expression."""


class CommandError(HarnessError):
    """Raised when an instruction command fails."""

    def __init__(self, message: str, command: str = "") -> None:
        self.command = command
        super().__init__(message)
