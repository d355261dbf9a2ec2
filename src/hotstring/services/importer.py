"""Bulk import of ``:OPTIONS:TRIGGER::REPLACEMENT`` script text."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from hotstring.core.errors import (
    DefinitionSyntaxError,
    HotstringError,
    MultilineUnclosedError,
    RegistrationError,
)
from hotstring.logging import get_logger
from hotstring.utils.escapes import translate_escapes

_LINE_RE = re.compile(r":(.*?):(.*?)::(.*)")
_LINE_SPLIT_RE = re.compile(r"\r?\n")

Register = Callable[[str, str], Any]

logger = get_logger("importer")


@dataclass(frozen=True, slots=True)
class ImportIssue:
    line_number: int
    line: str
    message: str
    error: HotstringError


@dataclass(slots=True)
class ImportResult:
    added: int = 0
    errors: list[ImportIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": self.added,
            "errors": [
                {"line": issue.line_number, "text": issue.line, "message": issue.message}
                for issue in self.errors
            ],
        }


def _collect_block(lines: list[str], first: int) -> tuple[list[str], int] | None:
    """Gather raw lines from ``first`` up to the next line opening with ``)``."""
    for index in range(first, len(lines)):
        if lines[index].strip().startswith(")"):
            return lines[first:index], index
    return None


def import_script(text: str, register: Register, stop_on_error: bool = False) -> ImportResult:
    """
    Register every hotstring line in ``text``.

    Blank lines, ``;`` comments and lines of any other shape are skipped.
    An empty replacement followed by a line opening with ``(`` starts a block
    that runs until a line opening with ``)``; the block lines are joined
    with newlines. Escapes are translated in the trigger and the replacement.

    Already registered definitions stay registered when a later line fails.

    Raises:
        MultilineUnclosedError: With ``stop_on_error`` when a block is never closed.
        RegistrationError: With ``stop_on_error`` when a definition is rejected.
    """
    result = ImportResult()

    def record(error: HotstringError) -> None:
        if stop_on_error:
            raise error
        logger.warning("Import skipped: {}", error)
        result.errors.append(ImportIssue(error.line_number, error.line, str(error), error))

    lines = _LINE_SPLIT_RE.split(text)
    index = 0
    while index < len(lines):
        line_number = index + 1
        line = lines[index].strip()
        index += 1
        if not line or line.startswith(";"):
            continue
        match = _LINE_RE.fullmatch(line)
        if not match:
            continue

        options, trigger, replacement = match.groups()
        trigger = translate_escapes(trigger)

        if not replacement.strip() and index < len(lines) and lines[index].strip().startswith("("):
            block = _collect_block(lines, index + 1)
            if block is None:
                record(MultilineUnclosedError(line_number, line))
                continue
            body, closing = block
            replacement = "\n".join(body)
            index = closing + 1

        replacement = translate_escapes(replacement)
        try:
            register(f":{options}:{trigger}", replacement)
        except DefinitionSyntaxError as exc:
            error = RegistrationError(line_number, line, exc)
            if stop_on_error:
                raise error from exc
            record(error)
        else:
            result.added += 1

    logger.info("Imported {} hotstrings with {} errors", result.added, len(result.errors))
    return result
