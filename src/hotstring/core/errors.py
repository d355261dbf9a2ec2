"""Exceptions raised by the hotstring engine."""

from __future__ import annotations


class HotstringError(Exception):
    """Base class for engine errors."""


class DefinitionSyntaxError(HotstringError, ValueError):
    """A definition string is not of the form ``:OPTIONS:TRIGGER``."""

    def __init__(self, definition: str) -> None:
        super().__init__(f"Invalid definition syntax: {definition}")
        self.definition = definition


class RegistrationError(HotstringError):
    """An imported line could not be registered."""

    def __init__(self, line_number: int, line: str, cause: Exception) -> None:
        super().__init__(f"Line {line_number}: {cause}")
        self.line_number = line_number
        self.line = line
        self.cause = cause


class MultilineUnclosedError(HotstringError):
    """A ``(`` continuation block never found its closing ``)`` line."""

    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f"Line {line_number}: Unclosed multiline block")
        self.line_number = line_number
        self.line = line
