"""Hotstring definition records and the ``:OPTIONS:TRIGGER`` parser."""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hotstring.core.errors import DefinitionSyntaxError

_DEFINITION_RE = re.compile(r":(.*?):(.+)", re.DOTALL)
_KEY_DELAY_RE = re.compile(r"K(-?\d+)")
_PRIORITY_RE = re.compile(r"P(-?\d+)")
_INLINE_FLAGS_RE = re.compile(r"\(\?[aiLmsux]+\)")


class Kind(Enum):
    LITERAL = "literal"
    PATTERN = "pattern"


class SendMode(Enum):
    INSTANT = "SI"
    EVENT_DELAYED = "SE"
    POLL_DELAYED = "SP"

    @property
    def is_delayed(self) -> bool:
        return self is not SendMode.INSTANT


@dataclass(frozen=True, slots=True)
class TextReplacement:
    text: str

    def describe(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class CallbackReplacement:
    callback: Callable[..., Any]

    def describe(self) -> str:
        """Source of the callback when available, otherwise its repr.

        For a lambda only the lambda expression is returned, not the
        statement it was written in.
        """
        try:
            source = inspect.getsource(self.callback)
        except (OSError, TypeError):
            return repr(self.callback)
        if getattr(self.callback, "__name__", "") == "<lambda>":
            return _lambda_expression(source) or repr(self.callback)
        return source


def _lambda_expression(source: str) -> str:
    """Cut ``lambda ...`` out of the statement that contains it."""
    start = source.find("lambda")
    if start < 0:
        return ""
    depth = 0
    for index in range(start, len(source)):
        char = source[index]
        if char in "([{":
            depth += 1
        elif char in ")]}":
            if depth == 0:
                return source[start:index].strip()
            depth -= 1
        elif char in ",\n" and depth == 0:
            return source[start:index].strip()
    return source[start:].strip()


Replacement = TextReplacement | CallbackReplacement


@dataclass(frozen=True, slots=True)
class HotstringOptions:
    fire_immediately: bool = False
    inside_word: bool = False
    no_backspace: bool = False
    case_sensitive: bool = False
    no_conformity: bool = False
    omit_end_char: bool = False
    raw_mode: bool = False
    execute: bool = False
    reset_after_fire: bool = False
    suspend_exempt: bool = False
    priority: int = 0
    key_delay: int = -1
    send_mode: SendMode = SendMode.INSTANT

    @property
    def uses_timed_typing(self) -> bool:
        return self.send_mode.is_delayed and self.key_delay > -1


@dataclass(frozen=True, slots=True)
class PatternOptions:
    """Accepted for pattern registrations; matching and execution ignore them."""

    priority: int = 0
    run_async: bool = False
    block_input: bool = True
    timeout: int = 3000


@dataclass(frozen=True, slots=True)
class Definition:
    kind: Kind
    trigger: str | re.Pattern[str]
    replacement: Replacement
    options: HotstringOptions = field(default_factory=HotstringOptions)
    label: str | None = None
    pattern_options: PatternOptions | None = None

    @property
    def priority(self) -> int:
        return self.options.priority

    @property
    def sort_length(self) -> int:
        if self.kind is Kind.PATTERN:
            return 0
        return len(self.trigger)

    @property
    def display_name(self) -> str:
        if self.label is not None:
            return self.label
        if isinstance(self.trigger, re.Pattern):
            return self.trigger.pattern
        return self.trigger


@dataclass(frozen=True, slots=True)
class ParsedDefinition:
    trigger: str
    options: HotstringOptions


def parse_options(raw: str) -> HotstringOptions:
    """Translate an option segment such as ``*C1K10SE`` into flags.

    Tokens are detected by substring, case-insensitively, so ``SE`` also
    counts as ``S`` and ``C1`` suppresses ``C``.
    """
    opts = raw.upper()

    case_sensitive = False
    no_conformity = False
    if "C1" in opts:
        no_conformity = True
    elif "C" in opts:
        case_sensitive = "C0" not in opts

    raw_mode = False
    if "T" in opts:
        raw_mode = "T0" not in opts
    elif "R" in opts:
        raw_mode = "R0" not in opts

    if "SE" in opts:
        send_mode = SendMode.EVENT_DELAYED
    elif "SP" in opts:
        send_mode = SendMode.POLL_DELAYED
    else:
        send_mode = SendMode.INSTANT

    key_delay = -1
    if match := _KEY_DELAY_RE.search(opts):
        key_delay = int(match.group(1))

    priority = 0
    if match := _PRIORITY_RE.search(opts):
        priority = int(match.group(1))

    return HotstringOptions(
        fire_immediately="*" in opts and "*0" not in opts,
        inside_word="?" in opts and "?0" not in opts,
        no_backspace="B0" in opts,
        case_sensitive=case_sensitive,
        no_conformity=no_conformity,
        omit_end_char="O" in opts and "O0" not in opts,
        raw_mode=raw_mode,
        execute="X" in opts,
        reset_after_fire="Z" in opts and "Z0" not in opts,
        suspend_exempt="S" in opts and "S0" not in opts,
        priority=priority,
        key_delay=key_delay,
        send_mode=send_mode,
    )


def parse_definition(definition: str) -> ParsedDefinition:
    """Split ``:OPTIONS:TRIGGER`` into its trigger and option set.

    Raises:
        DefinitionSyntaxError: If the string lacks the two colon-delimited
            segments or the trigger is empty.
    """
    match = _DEFINITION_RE.fullmatch(definition)
    if not match:
        raise DefinitionSyntaxError(definition)
    return ParsedDefinition(trigger=match.group(2), options=parse_options(match.group(1)))


def anchor_to_end(pattern: re.Pattern[str]) -> re.Pattern[str]:
    """Recompile ``pattern`` so it only matches at the end of the text.

    Leading inline flag groups such as ``(?i)`` stay in front of the wrapper,
    and a verbose pattern's trailing ``# comment`` is closed by a newline.
    """
    source = pattern.pattern
    prefix = ""
    while match := _INLINE_FLAGS_RE.match(source):
        prefix += match.group(0)
        source = source[match.end() :]
    closing = "\n" if pattern.flags & re.VERBOSE else ""
    return re.compile(rf"{prefix}(?:{source}{closing})\Z", pattern.flags)
